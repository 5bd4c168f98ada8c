# autodiscover_tasks 는 <app>.tasks 모듈만 import 한다
from .status_sweep_task import run_assignment_status_sweep

__all__ = ["run_assignment_status_sweep"]

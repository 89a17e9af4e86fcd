from .pre_flight import run_preflight_checks, ensure_executable, ensure_file
from .system import attach_log_file, detach_log_file, get_log_file_path
from .reporting import log_plan, log_report

__all__ = [
    "run_preflight_checks",
    "ensure_executable",
    "ensure_file",
    "attach_log_file",
    "detach_log_file",
    "get_log_file_path",
    "log_plan",
    "log_report",
]

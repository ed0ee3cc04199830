"""Service layer - the move-and-record pipeline."""
from .classifier import build_category_mapping, check_category_name, parse_extensions
from .provisioner import DestinationProvisioner
from .mover import CollisionSafeMover, list_source_files, timestamped_name, transfer_file
from .summary import summarize
from .runner import RunResult, record_history, run_mover

__all__ = [
    "build_category_mapping",
    "parse_extensions",
    "check_category_name",
    "DestinationProvisioner",
    "CollisionSafeMover",
    "list_source_files",
    "timestamped_name",
    "transfer_file",
    "summarize",
    "RunResult",
    "record_history",
    "run_mover",
]

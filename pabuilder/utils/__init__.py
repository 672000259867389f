from .command_executor import format_command, run_command, run_shell_command
from .file_manager import _safe_join, _safe_extract_tar, extract, remove_paths
from .configure_resolver import resolve_build_commands
from .target import infer_target_triple, cross_target_from_env, configure_cross_args
from . import pkg_config

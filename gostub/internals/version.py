from __future__ import annotations
import sys, platform

from gostub import __version__ as app_ver, __dev__ as is_dev

def _get_versions() -> dict[str, str]:
    import lark

    return {
        "app": app_ver,
        "python": platform.python_version(),
        "lark": getattr(lark, "__version__", "unknown"),
    }

def version_line() -> str:
    v = _get_versions()
    dev = " (dev)" if is_dev else ""
    return f"gostub {v['app']}{dev} • Python {v['python']} • lark {v['lark']}"

def print_version(stream=None) -> None:
    print(version_line(), file=stream or sys.stdout)

# Dotsync Platform Utilities
# Facts about the current machine and user, used for host filtering and templates

import getpass
import os
import platform
import socket

# Platform name mapping: system name -> dotsync platform name
_PLATFORM_MAP: dict[str, str] = {
    "Darwin": "macos",
    "Linux": "linux",
    "Windows": "windows",
}


def get_current_platform() -> str:
    """
    Get the current platform identifier.

    Returns:
        Platform string: "macos", "linux", "windows" or the lowercased system name.
    """
    system = platform.system()
    return _PLATFORM_MAP.get(system, system.lower())


def get_hostname() -> str:
    """Get the current machine's hostname."""
    return socket.gethostname()


def get_username() -> str:
    """Get the name of the user running dotsync (empty when it cannot be determined)."""
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ""


def get_uid() -> int:
    """Get the effective uid of the current process."""
    return os.geteuid()


def get_os_release() -> dict[str, str]:
    """
    Parse the os-release file of the current machine.

    Returns:
        Mapping of os-release keys (``ID``, ``VERSION_ID``, ...), empty when unavailable.
    """
    try:
        return dict(platform.freedesktop_os_release())
    except OSError:
        return {}

"""Facts about the platform the tool is running on."""

import platform
import sys

LINUX = sys.platform.startswith("linux")
MACOS = sys.platform == "darwin"
WINDOWS = sys.platform == "win32"

_MACHINE = platform.machine().lower()

X86_64 = _MACHINE in {"x86_64", "amd64"}
X86 = _MACHINE in {"i386", "i486", "i586", "i686", "x86"}
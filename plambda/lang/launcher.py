"""Line-editing wrappers. The interactive toplevel has no line editing of its own, so before anything runs it tries to
replace itself with a wrapper (such as rlwrap) running the toplevel again.
"""

import os
import sys

WRAPPERS = ["rlwrap", "ledit"]
NO_WRAPPER = "--no-wrapper"


def wrapped_args(wrapper, argv):
    """Command line running the toplevel with argv under wrapper. NO_WRAPPER stops the new process from wrapping
    itself again.
    """
    return [wrapper, sys.executable, "-m", "plambda"] + list(argv) + [NO_WRAPPER]


def wrap(wrappers, argv):
    """Replaces the current process with the first wrapper that can be started. Only returns if wrappers is empty or
    none of them could be started.
    """
    for wrapper in wrappers or []:
        try:
            os.execvp(wrapper, wrapped_args(wrapper, argv))
        except OSError:
            continue

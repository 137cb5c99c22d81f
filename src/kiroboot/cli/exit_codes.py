"""Process exit codes.

Any other non-zero code is the installer's own exit status, passed through.
"""

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

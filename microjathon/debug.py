from typing import Optional, TextIO


class DebugLog:
    """Verbosity-gated trace writer shared by the interpreter and compiler.

    Messages are appended to `debug_file` (opened lazily on first use) when
    the configured level is greater than zero. Each message carries the
    minimum level at which it is emitted.
    """
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp: Optional[TextIO] = None

    def enabled(self, level: int = 1) -> bool:
        return self.debug_level >= level

    def __call__(self, msg: str, level: int = 1):
        if not self.enabled(level):
            return
        if self.debug_fp is None:
            self.debug_fp = open(self.debug_file, 'a', encoding='utf-8')
        self.debug_fp.write(msg + '\n')
        self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

import json
import os
import stat
from typing import Any, Dict, List


class FakeDocker:
    """A stand-in ``docker`` executable that records how it was invoked.

    Each invocation appends one JSON line with its arguments and standard input to a log file, and
    exits with the status configured for its sub-command. A ``run`` can be made to block for a while
    after it has been logged, so that a test can signal it.
    """

    def __init__(self, directory: str, exit_codes: Dict[str, int] | None = None, run_seconds: float = 0):
        self.__log_file_path = os.path.join(directory, 'docker-invocations.jsonl')
        self.__binary_path = os.path.join(directory, 'docker')
        self.__write_script(exit_codes or dict(), run_seconds)

    @property
    def binary_path(self) -> str:
        return self.__binary_path

    @property
    def invocations(self) -> List[Dict[str, Any]]:
        if not os.path.exists(self.__log_file_path):
            return []

        with open(self.__log_file_path, 'r', encoding='utf-8') as f:
            return [json.loads(line) for line in f if line.strip()]

    def __write_script(self, exit_codes: Dict[str, int], run_seconds: float) -> None:
        script = '\n'.join([
            '#!/usr/bin/env python3',
            'import json, sys, time',
            'args = sys.argv[1:]',
            'stdin = sys.stdin.read() if "--password-stdin" in args else None',
            f'with open({self.__log_file_path!r}, "a", encoding="utf-8") as f:',
            '    f.write(json.dumps(dict(args=args, stdin=stdin)) + "\\n")',
            'sub_command = next((arg for arg in ("login", "pull", "run") if arg in args), None)',
            f'if sub_command == "run": time.sleep({run_seconds!r})',
            f'sys.exit({exit_codes!r}.get(sub_command, 0))',
            ''
        ])

        with open(self.__binary_path, 'w', encoding='utf-8') as f:
            f.write(script)

        os.chmod(self.__binary_path, os.stat(self.__binary_path).st_mode | stat.S_IXUSR)

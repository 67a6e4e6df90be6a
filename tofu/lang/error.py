"""Error reporting for the Tofu front end. Only InterpreterExceptions should be encountered while running: if another
type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Note that Tofu programs never raise for their own mistakes. Evaluation errors are ordinary Error objects (see
core/object.py); the session converts a top-level Error into an InterpreterException so it is displayed here.
"""

import sys

from termcolor import colored


class InterpreterException(Exception):
    """Templates an error message so that it can be displayed by ErrorHandler. exprs are formatted into msg in bold;
    exprs[0] should be the offending source line, which start/end index into for the diagnosis.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False, line_num=None):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.raw_msg = msg.format(*exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal
        self.line_num = line_num

        super().__init__(self.raw_msg)

    @staticmethod
    def escape(msg):
        """Escapes braces in msg so that it can be used as a template."""
        return msg.replace("{", "{{").replace("}", "}}")


class ErrorHandler:
    """Context manager that displays InterpreterExceptions (and suppresses them, if not fatal)."""
    ERROR = "red"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error):
        """Returns offending part of error.expr highlighted and bolded, with a caret underneath."""
        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def location(self, error):
        """Returns 'file:line:col: ' for error, using the last registered file/line for whatever error lacks."""
        if not self.traceback:
            return ""

        file, (__, line_num) = list(self.traceback.items())[-1]
        if error.line_num is not None:
            line_num = error.line_num

        if line_num is None:
            return f"{file}: "
        elif error.expr and error.diagnosis:
            return f"{file}:{line_num}:{error.start + 1}: "
        return f"{file}:{line_num}: "

    def report(self, error):
        """Prints a single error, with a diagnosis if it has one."""
        error_msg = colored(self.location(error), attrs=["bold"])

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

    def throw(self, error):
        """Throws error, which must be an InterpreterException. Errors that group several others (ParseErrors) report
        every one of them.
        """
        for sub_error in getattr(error, "errors", None) or [error]:
            self.report(sub_error)

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(InterpreterException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(InterpreterException("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, InterpreterException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(InterpreterException("unknown error: '{}: {}'", [exc_type.__name__, str(exc_val)],
                                            internal=True))
            do_exit = True

        return not do_exit

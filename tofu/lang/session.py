"""Session control for Tofu. Runs the lexer, parser and evaluator over source from a file or from the shell, keeping
one top-level Environment for the whole session so that let bindings carry over from one input to the next.
"""

from tofu.core.ast import LetStatement
from tofu.core.evaluator import evaluate
from tofu.core.lexer import lex
from tofu.core.object import Error, new_environment
from tofu.core.parser import ParseError, parse
from tofu.core.token import TokenKind
from tofu.lang.error import InterpreterException


class Session:
    """Governs a Tofu session, with control over its top-level Environment."""
    SH_FILE = "<stdin>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, tokens_only=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path                # used for error messages
        self.cmd_line = cmd_line        # whether or not in command-line mode
        self.tokens_only = tokens_only  # lex only, and output tokens instead of values

        self.environment = new_environment()
        self.to_exec = {}  # dict of line num: (source, Program) to execute
        self.results = []  # outputs of run that should be displayed

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise InterpreterException("'{}' could not be opened", path, diagnosis=False)

            self.add(source, 1)

        elif not cmd_line:
            raise InterpreterException("'{}' is a reserved filename", Session.SH_FILE, diagnosis=False)

    @staticmethod
    def preprocess_line(line, add_to_prev=""):
        """Preprocesses a line from the command-line: joins it to add_to_prev (the unfinished lines before it, if
        any). Returns the joined line and whether or not it needs a line continuation, which is the case as long as
        there are more '(' and '{' than ')' and '}'.
        """
        if add_to_prev:
            line = add_to_prev + "\n" + line

        balance = 0
        for token in lex(line):
            if token.kind in (TokenKind.LPAREN, TokenKind.LBRACE):
                balance += 1
            elif token.kind in (TokenKind.RPAREN, TokenKind.RBRACE):
                balance -= 1

        return line, balance > 0

    @staticmethod
    def tokens(source):
        """Returns the tokens of source, not including EOF."""
        return [token for token in lex(source) if token.kind is not TokenKind.EOF]

    def add(self, source, line_num):
        """Parses source and queues it for execution. line_num is the line source starts at. Raises ParseError
        if source cannot be parsed.
        """
        self.error_handler.register_line(self.path, source.split("\n", 1)[0], line_num)  # in case error is raised

        if self.tokens_only:
            self.results.extend(Session.tokens(source))
        else:
            try:
                program = parse(lex(source))
            except ParseError as error:
                raise error.locate(source, line_num)
            self.to_exec[line_num] = (source, program)

        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Evaluates every queued program in this session's Environment. Values of programs that do not end with a
        let statement are added to results. Raises an InterpreterException if evaluation ends in an Error.
        """
        for line_num, (source, program) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, source.split("\n", 1)[0], line_num)

            try:
                result = evaluate(program, self.environment)
            finally:
                del self.to_exec[line_num]

            if isinstance(result, Error):
                raise InterpreterException(InterpreterException.escape(result.message), diagnosis=False)

            if program.statements and not isinstance(program.statements[-1], LetStatement):
                self.results.append(result)

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the oldest result."""
        return self.results.pop(0)

"""Handles interactive/command-line mode for the Tofu interpreter. Uses cmd as backend."""

import cmd

from tofu.core.lexer import lex
from tofu.core.parser import ParseError, parse
from tofu.lang.error import InterpreterException
from tofu.lang.session import Session


class Shell(cmd.Cmd):
    """Tofu interpreter shell."""
    intro = "Welcome to the Tofu interpreter.\nType 'help' for more information."
    prompt = ">> "
    secondary_prompt = ".. "  # used for line continuations
    _tmp_prompt = ">> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary Tofu source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                start = self.line_num - line.count("\n")
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                self.sess.add(line, start)
                self.sess.run()

                while self.sess.results:
                    print(repr(self.sess.pop()) if self.sess.tokens_only else self.sess.pop())

    def do_tokens(self, arg):
        """Prints the tokens of the given source, one per line."""
        for token in Session.tokens(arg):
            print(repr(token))

    def do_ast(self, arg):
        """Prints the syntax tree of the given source, without evaluating it."""
        with self.sess.error_handler:
            self.line_num += 1
            try:
                program = parse(lex(arg))
            except ParseError as error:
                raise error.locate(arg, self.line_num)
            print(program.display())

    def do_help(self, arg):
        """Prints a short intro rather than the docs of each command."""
        print("Welcome to the Tofu interpreter!\n\n"
              "Tofu is a small C-like language with integers, booleans, let bindings, \n"
              "if/else expressions and first-class functions with closures.\n\n"
              "Try it out by typing 'let add = fn(x, y) { x + y };'. This will bind a \n"
              "function to the name 'add'. Next, try typing 'add(1, 2)', giving 3 as the \n"
              "result. 'tokens SOURCE' and 'ast SOURCE' show how SOURCE is lexed and parsed.\n\n"
              "Function calls nest at most about 90 deep (Python's recursion limit). Deeper \n"
              "recursion is reported as 'maximum recursion depth exceeded'.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            with self.sess.error_handler:
                raise InterpreterException("unrecognized argument: '{}'", arg, diagnosis=False)
            return False
        return True

"""Handles interactive/command-line mode for the lox interpreter. Uses cmd as backend."""

import cmd

from lox.lang.session import Session


class Shell(cmd.Cmd):
    """lox interpreter shell."""
    intro = "lox interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def parseline(self, line):
        """Only plain words are commands: "!" and "?" start lox expressions rather than cmd shortcuts."""
        if line.strip()[:1] in ("!", "?"):
            return None, None, line
        return super().parseline(line)

    def default(self, line):
        """Executes arbitrary lox source, waiting for more lines while a block is left open."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            source = self._tmp_line + line + "\n"

            if Session.is_incomplete(source):
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            try:
                self.sess.run(source)
            finally:
                self.sess.error_handler.reset()  # a syntax error only spoils its own line

    def do_help(self, arg):
        """Prints a short intro to the language rather than command docs."""
        print("Welcome to the lox interpreter!\n\n"
              "lox is a small dynamically-typed scripting language with numbers, strings, \n"
              "booleans and nil, variables, blocks, if/else, while and for loops.\n\n"
              "Try it out by typing 'var x = 1 + 2;'. This will bind 3 to the name 'x'. \n"
              "Next, try typing 'print \"x is \" + x;'. Blocks may span several lines.")

    def emptyline(self):
        """Do not repeat previous command on empty line, but keep collecting an open block."""
        if self._tmp_line:
            self.default("")
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True

import textwrap
import colorama
import os
import numpy as np

from vlmcore.version import __version__

cwd = os.getcwd()


class Writer(object):
    fore_colours = ['', colorama.Fore.BLUE, colorama.Fore.CYAN, colorama.Fore.YELLOW, colorama.Fore.RED]
    reset = colorama.Style.RESET_ALL

    output_columns = 80
    separator = '-'*output_columns
    vlmcore_header = \
"""--------------------------------------------------------------------------------
                 vlmcore: vortex lattice system state container
--------------------------------------------------------------------------------"""

    wrapper = textwrap.TextWrapper(width=output_columns, break_long_words=False)

    def __init__(self):
        self.print_screen = False
        self.print_file = False
        self.file = None
        self.file_route = ''
        self.file_name = ''

    def initialise(self, print_screen, print_file, file_route=None, file_name=None):
        # copy settings
        self.print_screen = print_screen
        self.print_file = print_file

        if self.print_file:
            self.file_route = file_route
            self.file_name = file_name
            # create folder if necessary
            if not os.path.exists(self.file_route):
                try:
                    os.makedirs(self.file_route)
                except FileExistsError:
                    pass

            self.file = open(os.path.join(self.file_route, self.file_name), 'w')

        self.print_welcome_message()

    def print_welcome_message(self):
        self.__call__(self.vlmcore_header)
        self.__call__('vlmcore version ' + __version__, 2)
        self.__call__('Running vlmcore from ' + cwd, 2)

    def cout_quiet(self):
        self.print_screen = False

    def cout_talk(self):
        self.print_screen = True

    def print_separator(self, level=0):
        self.__call__(self.separator, level)

    def __call__(self, in_line, level=0):
        if level > 4:
            raise AttributeError('Output level cannot be > 4')
        if self.print_screen:
            lines = in_line.split("\n")
            if len(lines) == 1:
                print(self.fore_colours[level] + in_line + self.reset)
            else:
                for line in lines:
                    if len(line) > self.output_columns:
                        line = '\n'.join(self.wrapper.wrap(line))

                    print(self.fore_colours[level] + line + self.reset)
        if self.print_file and self.file is not None:
            lines = in_line.split("\n")
            if len(lines) == 1:
                self.file.write(in_line + '\n')
            else:
                newline = ''
                for line in lines:
                    if len(line) > self.output_columns:
                        line = '\n'.join(self.wrapper.wrap(line))

                    newline += line + "\n"
                self.file.write(newline)

    def close(self):
        if self.file is not None:
            if not self.file.closed:
                self.file.close()

    def __del__(self):
        self.close()


cout_wrap = Writer()


def start_writer():
    global cout_wrap
    cout_wrap = Writer()


def finish_writer():
    global cout_wrap
    if cout_wrap is not None:
        cout_wrap.close()


def cout_quiet():
    cout_wrap.cout_quiet()


def cout_talk():
    cout_wrap.cout_talk()


# table output for per-surface summaries
class TablePrinter(object):

    divider_char = '|'
    line_char = '='

    def __init__(self, n_fields=3, field_length=12, field_types=None):
        self.n_fields = n_fields
        self.divider_line = None
        try:
            field_length[0]
        except TypeError:
            self.field_length = np.full((self.n_fields, ), field_length, dtype=int)
        else:
            if len(field_length) == n_fields:
                self.field_length = field_length
            else:
                raise ValueError('len(field_length) /= n_fields')
        self.field_names = None
        if field_types is None:
            field_types = ['g']*self.n_fields
        self.field_types = field_types

        if cout_wrap is None:
            start_writer()

    def print_header(self, field_names, level=0):
        self.field_names = field_names
        if not len(self.field_names) == self.n_fields:
            raise ValueError('len(field_names) /= n_fields')

        string = ''
        divider_line = ''
        for i_field in range(self.n_fields):
            field_length = self.field_length[i_field]
            string += self.divider_char + '{' + str(i_field) + ':^' + str(field_length + 2) + '}'
            divider_line += self.divider_char + (field_length + 2)*self.line_char

        string += self.divider_char
        divider_line += self.divider_char
        self.divider_line = divider_line
        cout_wrap(divider_line, level)
        cout_wrap(string.format(*(self.field_names)), level)
        cout_wrap(divider_line, level)

    def print_line(self, line_data, level=0):
        string = ''
        for i_field in range(self.n_fields):
            string += (self.divider_char +
                       '{0[' +
                       str(i_field) +
                       ']:^' +
                       str(self.field_length[i_field] + 2) +
                       self.field_types[i_field] +
                       '}')

        string += self.divider_char
        cout_wrap(string.format(line_data), level)

    def print_divider_line(self, level=0):
        cout_wrap(self.divider_line, level)

#!/usr/bin/env python3
"""
Terminal Graphing Calculator
Type a formula of x, see it plotted with intercepts, domain, range and
the transformations it looks like.
"""

import curses
import logging
import os
import time

from function_analyzer import describe
from graphing_session import (
    DEFAULT_X_RANGE, DEFAULT_Y_RANGE, RANGE_LIMITS, GraphSession,
)

logger = logging.getLogger(__name__)

# ============================================================================
# GLOBAL STATE
# ============================================================================

session = GraphSession()

# UI States
edit_mode = False
show_help = False
cursor_pos = 0
palette_index = 0
status_msg = "Space=Edit | E=Examples | ?=Help"

# Symbol palette (inserted at the cursor with Tab while editing)
SYMBOL_PALETTE = [
    "^", "sqrt()", "sin()", "cos()", "tan()", "log()", "abs()",
    "pi", "e", "arcsin()", "arccos()", "arctan()",
]

EXAMPLE_FORMULAS = [
    "x^2",
    "y = x^2 + 3",
    "sin(x) + cos(x)",
    "sqrt(abs(x))",
    "log(x+1) / x",
    "e^x + arctan(x)",
    "-(x - 2)^2 + 4",
    "1/x",
]
current_example_index = 0

HELP_LINES = [
    "WHAT WORKS:",
    "  x+2, 3*x-1 | x^2, x^3 | sin(x), cos(x), tan(x)",
    "  arcsin(x), arccos(x), arctan(x) | log(x) (natural), e^x",
    "  sqrt(x) | abs(x) | constants pi, e",
    "WHAT DOESN'T WORK:",
    "  multiple variables | implicit or piecewise functions | calculus",
    "KEYS:",
    "  Space/Enter=edit & graph | Tab=insert symbol (Up/Down to pick)",
    "  X/x=widen/narrow x range | Y/y=widen/narrow y range | L/R=pan | 0=reset",
    "  Intercepts are marked with 'o' on the axes.",
]

RANGE_STEP = 1.25

# Color Pairs
COLOR_HEADER = 1
COLOR_EXPR = 2
COLOR_EXPR_ACTIVE = 3
COLOR_INFO = 4
COLOR_ERROR = 5
COLOR_PLOT = 6
COLOR_AXIS = 7
COLOR_INTERCEPT = 8
COLOR_MODE = 9

# ============================================================================
# RANGE CONTROLS
# ============================================================================

def clamp_range(lo, hi):
    """Keep a range inside RANGE_LIMITS with lo < hi"""
    low_limit, high_limit = RANGE_LIMITS
    lo = max(low_limit, min(high_limit, lo))
    hi = max(low_limit, min(high_limit, hi))
    if hi - lo < 1:
        center = (lo + hi) / 2
        lo, hi = center - 0.5, center + 0.5
    return lo, hi


def scale_range(rng, factor):
    center = (rng[0] + rng[1]) / 2
    half = (rng[1] - rng[0]) / 2 * factor
    return clamp_range(center - half, center + half)


def shift_range(rng, amount):
    lo, hi = rng
    low_limit, high_limit = RANGE_LIMITS
    amount = max(low_limit - lo, min(high_limit - hi, amount))
    return lo + amount, hi + amount


def insert_symbol(formula, pos, symbol):
    """Insert a palette symbol; returns the new formula and cursor position"""
    new_formula = formula[:pos] + symbol + formula[pos:]
    # Land inside the parentheses of a function call
    if symbol.endswith("()"):
        return new_formula, pos + len(symbol) - 1
    return new_formula, pos + len(symbol)

# ============================================================================
# PLOTTING
# ============================================================================

def to_cell(x_val, y_val, plot_width, plot_height):
    """Grid (row, col) for a point, or None if it falls outside the view"""
    x_min, x_max = session.x_range
    y_min, y_max = session.y_range
    if not (x_min <= x_val <= x_max and y_min <= y_val <= y_max):
        return None
    col = int((x_val - x_min) / (x_max - x_min) * (plot_width - 1))
    row = int((y_max - y_val) / (y_max - y_min) * (plot_height - 1))
    return row, col


def render_plot(plot_width, plot_height):
    """Return the plot as a list of rows of (char, color) cells"""
    grid = [[(' ', COLOR_PLOT) for _ in range(plot_width)] for _ in range(plot_height)]

    # Axes
    origin = to_cell(0.0, 0.0, plot_width, plot_height)
    x_axis_cell = to_cell(session.x_range[0], 0.0, plot_width, plot_height)
    y_axis_cell = to_cell(0.0, session.y_range[0], plot_width, plot_height)
    if x_axis_cell:
        for col in range(plot_width):
            grid[x_axis_cell[0]][col] = ('-', COLOR_AXIS)
    if y_axis_cell:
        for row in range(plot_height):
            grid[row][y_axis_cell[1]] = ('|', COLOR_AXIS)
    if origin:
        grid[origin[0]][origin[1]] = ('+', COLOR_AXIS)

    # Curve
    for point in session.samples:
        cell = to_cell(point.x, point.y, plot_width, plot_height)
        if cell:
            grid[cell[0]][cell[1]] = ('*', COLOR_PLOT)

    # Intercepts
    analysis = session.analysis
    for text in analysis.x_intercepts:
        cell = to_cell(float(text), 0.0, plot_width, plot_height)
        if cell:
            grid[cell[0]][cell[1]] = ('o', COLOR_INTERCEPT)
    if analysis.y_intercept is not None:
        cell = to_cell(0.0, float(analysis.y_intercept), plot_width, plot_height)
        if cell:
            grid[cell[0]][cell[1]] = ('o', COLOR_INTERCEPT)

    return grid

# ============================================================================
# DRAWING FUNCTIONS
# ============================================================================

def draw_header(stdscr):
    """Draw header with title and status"""
    height, width = stdscr.getmaxyx()

    try:
        title = "=== GRAPHING CALC ==="
        stdscr.addstr(0, max(0, (width - len(title)) // 2), title,
                      curses.color_pair(COLOR_HEADER) | curses.A_BOLD)

        mode_str = "EDIT" if edit_mode else "NAV"
        status_line = f"[{mode_str}] {status_msg}"
        stdscr.addstr(1, 2, status_line[:width-4],
                      curses.color_pair(COLOR_MODE) | curses.A_BOLD)
    except curses.error:
        pass


def draw_formula(stdscr, start_row):
    """Draw the formula line and the symbol palette"""
    height, width = stdscr.getmaxyx()
    row = start_row

    try:
        display = session.formula
        if edit_mode:
            display = display[:cursor_pos] + "|" + display[cursor_pos:]
        line = f" f(x) = {display}"
        if len(line) > width - 4:
            line = line[:width-7] + "..."

        color = COLOR_EXPR_ACTIVE if edit_mode else COLOR_EXPR
        attr = curses.color_pair(color) | curses.A_BOLD
        if session.error:
            attr = curses.color_pair(COLOR_ERROR)
        stdscr.addstr(row, 2, line, attr)
        row += 1

        if edit_mode:
            col = 2
            stdscr.addstr(row, col, "Tab inserts: ", curses.color_pair(COLOR_HEADER))
            col += len("Tab inserts: ")
            for i, symbol in enumerate(SYMBOL_PALETTE):
                if col + len(symbol) + 1 >= width - 2:
                    break
                attr = curses.A_REVERSE if i == palette_index else curses.A_NORMAL
                stdscr.addstr(row, col, symbol, attr)
                col += len(symbol) + 1
            row += 1

        if session.error:
            stdscr.addstr(row, 2, f"! {session.error}"[:width-4],
                          curses.color_pair(COLOR_ERROR) | curses.A_BOLD)
            row += 1

        return row + 1
    except curses.error:
        return row


def draw_analysis(stdscr, start_row):
    """Draw the function analysis panel"""
    height, width = stdscr.getmaxyx()
    row = start_row

    try:
        stdscr.addstr(row, 2, "FUNCTION ANALYSIS:",
                      curses.color_pair(COLOR_HEADER) | curses.A_BOLD)
        row += 1
        for label, text in describe(session.analysis):
            line = f"  {label}: {text}"
            stdscr.addstr(row, 2, line[:width-4], curses.color_pair(COLOR_INFO))
            row += 1
        return row + 1
    except curses.error:
        return row


def draw_plot(stdscr, start_row):
    """Draw ASCII plot"""
    height, width = stdscr.getmaxyx()
    row = start_row

    try:
        plot_height = min(24, height - row - 3)
        plot_width = min(75, width - 4)
        if plot_height < 3 or plot_width < 3:
            return row

        for r, line in enumerate(render_plot(plot_width, plot_height)):
            for c, (char, color) in enumerate(line):
                if char != ' ':
                    stdscr.addstr(row + r, 2 + c, char, curses.color_pair(color))

        range_row = row + plot_height
        x_min, x_max = session.x_range
        y_min, y_max = session.y_range
        range_info = f"x:[{x_min:.2f}, {x_max:.2f}] y:[{y_min:.2f}, {y_max:.2f}] X/x Y/y=Range L/R=Pan"
        stdscr.addstr(range_row, 2, range_info[:width-4], curses.color_pair(COLOR_HEADER))
        return range_row + 1
    except curses.error:
        return row


def draw_help(stdscr, start_row):
    """Draw help panel"""
    height, width = stdscr.getmaxyx()
    row = start_row

    try:
        for line in HELP_LINES:
            if row >= height - 1:
                break
            attr = curses.A_BOLD if line.endswith(":") else curses.A_NORMAL
            stdscr.addstr(row, 2, line[:width-4], curses.color_pair(COLOR_HEADER) | attr)
            row += 1
        return row + 1
    except curses.error:
        return row


def draw_footer(stdscr):
    """Draw footer"""
    height, width = stdscr.getmaxyx()

    try:
        if not edit_mode:
            tips = [
                "Tip: y = x^2 + 3 | sin(x) + cos(x) | sqrt(abs(x))",
                "Tip: E cycles examples | ? shows help | Esc quits",
            ]
            tip = tips[int(time.time() / 3) % len(tips)]
            stdscr.addstr(height - 1, 2, tip[:width-4], curses.color_pair(COLOR_HEADER))
    except curses.error:
        pass


def draw_screen(stdscr):
    """Main draw function"""
    stdscr.erase()

    row = 3
    draw_header(stdscr)

    row = draw_formula(stdscr, row)
    if show_help:
        row = draw_help(stdscr, row)
    else:
        row = draw_analysis(stdscr, row)
        row = draw_plot(stdscr, row)

    draw_footer(stdscr)

    stdscr.refresh()

# ============================================================================
# INPUT HANDLING
# ============================================================================

def graph():
    """Evaluate the session and report the outcome in the status line"""
    global status_msg

    result = session.evaluate()
    if result.ok:
        status_msg = f"Graphed {len(result.samples)} points"
    else:
        status_msg = "Fix the formula and press Enter"


def handle_editing(key):
    """Handle text editing"""
    global cursor_pos, palette_index, status_msg

    formula = session.formula

    if key == curses.KEY_LEFT:
        cursor_pos = max(0, cursor_pos - 1)
    elif key == curses.KEY_RIGHT:
        cursor_pos = min(len(formula), cursor_pos + 1)
    elif key == curses.KEY_UP:
        palette_index = (palette_index - 1) % len(SYMBOL_PALETTE)
    elif key == curses.KEY_DOWN:
        palette_index = (palette_index + 1) % len(SYMBOL_PALETTE)
    elif key == ord('\t'):
        session.formula, cursor_pos = insert_symbol(formula, cursor_pos,
                                                    SYMBOL_PALETTE[palette_index])
    elif key == curses.KEY_BACKSPACE or key == 127 or key == 8:
        if cursor_pos > 0:
            session.formula = formula[:cursor_pos-1] + formula[cursor_pos:]
            cursor_pos -= 1
    elif key == curses.KEY_DC:
        if cursor_pos < len(formula):
            session.formula = formula[:cursor_pos] + formula[cursor_pos+1:]
    elif 32 <= key <= 126:
        session.formula = formula[:cursor_pos] + chr(key) + formula[cursor_pos:]
        cursor_pos += 1
        status_msg = "Editing..."


def handle_range(key):
    """Handle x/y range changes"""
    global status_msg

    if key == ord('X'):
        session.set_x_range(*scale_range(session.x_range, RANGE_STEP))
        status_msg = "x range widened"
    elif key == ord('x'):
        session.set_x_range(*scale_range(session.x_range, 1 / RANGE_STEP))
        status_msg = "x range narrowed"
    elif key == ord('Y'):
        session.set_y_range(*scale_range(session.y_range, RANGE_STEP))
        status_msg = "y range widened"
    elif key == ord('y'):
        session.set_y_range(*scale_range(session.y_range, 1 / RANGE_STEP))
        status_msg = "y range narrowed"
    elif key in (ord('l'), ord('L')):
        shift = (session.x_range[1] - session.x_range[0]) * 0.2
        session.set_x_range(*shift_range(session.x_range, -shift))
        status_msg = "Panned left"
    elif key in (ord('r'), ord('R')):
        shift = (session.x_range[1] - session.x_range[0]) * 0.2
        session.set_x_range(*shift_range(session.x_range, shift))
        status_msg = "Panned right"
    elif key == ord('0'):
        session.set_x_range(*DEFAULT_X_RANGE)
        session.set_y_range(*DEFAULT_Y_RANGE)
        status_msg = "View reset"

    # The x range is the sampling interval, so resample
    if key in (ord('X'), ord('x'), ord('l'), ord('L'), ord('r'), ord('R'), ord('0')):
        session.evaluate()


def handle_special_commands(key):
    """Handle special commands"""
    global edit_mode, show_help, cursor_pos, status_msg, current_example_index

    if key == ord(' ') and not edit_mode:
        edit_mode = True
        cursor_pos = len(session.formula)
        status_msg = "Editing - Enter graphs, Esc cancels"

    elif key == ord('\n') or key == 10:
        if edit_mode:
            edit_mode = False
            graph()
        else:
            edit_mode = True
            cursor_pos = len(session.formula)
            status_msg = "Editing - Enter graphs, Esc cancels"

    elif key == ord('e') or key == ord('E'):
        current_example_index = (current_example_index + 1) % len(EXAMPLE_FORMULAS)
        session.formula = EXAMPLE_FORMULAS[current_example_index]
        cursor_pos = len(session.formula)
        graph()
        status_msg = f"Example {current_example_index + 1}/{len(EXAMPLE_FORMULAS)}: {status_msg}"

    elif key == ord('?'):
        show_help = not show_help
        status_msg = "Help " + ("ON" if show_help else "OFF")

# ============================================================================
# MAIN LOOP
# ============================================================================

def init_colors():
    """Initialize color pairs"""
    curses.start_color()
    curses.use_default_colors()

    curses.init_pair(COLOR_HEADER, curses.COLOR_CYAN, -1)
    curses.init_pair(COLOR_EXPR, curses.COLOR_WHITE, -1)
    curses.init_pair(COLOR_EXPR_ACTIVE, curses.COLOR_YELLOW, -1)
    curses.init_pair(COLOR_INFO, curses.COLOR_GREEN, -1)
    curses.init_pair(COLOR_ERROR, curses.COLOR_RED, -1)
    curses.init_pair(COLOR_PLOT, curses.COLOR_MAGENTA, -1)
    curses.init_pair(COLOR_AXIS, curses.COLOR_WHITE, -1)
    curses.init_pair(COLOR_INTERCEPT, curses.COLOR_RED, -1)
    curses.init_pair(COLOR_MODE, curses.COLOR_GREEN, -1)


def main(stdscr):
    """Main application loop"""
    global edit_mode, status_msg

    try:
        curses.curs_set(0)  # Hide cursor
    except curses.error:
        pass
    stdscr.keypad(True)
    curses.cbreak()

    init_colors()
    stdscr.clear()

    graph()
    status_msg = "Welcome! Space=Edit | E=Examples | ?=Help"
    draw_screen(stdscr)

    while True:
        stdscr.timeout(100)
        key = stdscr.getch()
        if key == -1:
            # Keep the footer tips rotating
            if not edit_mode:
                draw_footer(stdscr)
                stdscr.refresh()
            continue

        if key == 27:  # ESC
            if edit_mode:
                edit_mode = False
                status_msg = "Edit cancelled"
            else:
                break
        elif edit_mode and key not in (ord('\n'), 10):
            handle_editing(key)
        elif key in (ord('X'), ord('x'), ord('Y'), ord('y'), ord('l'), ord('L'),
                     ord('r'), ord('R'), ord('0')):
            handle_range(key)
        else:
            handle_special_commands(key)

        draw_screen(stdscr)


def setup_logging():
    """Log to the file named by GRAPHCALC_LOG, if any; the terminal belongs to curses"""
    log_file = os.environ.get("GRAPHCALC_LOG")
    if not log_file:
        logging.getLogger().addHandler(logging.NullHandler())
        return
    level = os.environ.get("GRAPHCALC_LOG_LEVEL", "DEBUG").upper()
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, level, logging.DEBUG),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def run():
    """Entry point"""
    setup_logging()
    try:
        curses.wrapper(main)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.exception("calculator crashed")
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()

if __name__ == "__main__":
    run()

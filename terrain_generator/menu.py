# terrain_generator/menu.py

"""
Text menu for editing a terrain interactively: choose an action, enter the
centre, radius and strength, repeat, then save and exit.
"""

import enum
import logging

from .editor import EditCommand, EditKind
from .errors import ExportError, InputValidationError

logger = logging.getLogger(__name__)


class Action(enum.Enum):
    ELEVATE = "elevate"
    DEPRESS = "depress"
    FLATTEN = "flatten"
    SAVE_AND_EXIT = "save"


# Menu numbers and names accepted for each action.
_ACTION_ALIASES = {
    "1": Action.ELEVATE, "elevate": Action.ELEVATE, "raise": Action.ELEVATE,
    "2": Action.DEPRESS, "depress": Action.DEPRESS, "lower": Action.DEPRESS,
    "3": Action.FLATTEN, "flatten": Action.FLATTEN, "level": Action.FLATTEN,
    "4": Action.SAVE_AND_EXIT, "save": Action.SAVE_AND_EXIT, "exit": Action.SAVE_AND_EXIT,
}

_EDIT_KINDS = {
    Action.ELEVATE: EditKind.ELEVATE,
    Action.DEPRESS: EditKind.DEPRESS,
    Action.FLATTEN: EditKind.FLATTEN,
}

MENU_PROMPT = (
    "Choose an action: (1) Elevate terrain, (2) Depress terrain, "
    "(3) Level terrain, (4) Save and exit"
)


def parse_action(text: str) -> Action:
    action = _ACTION_ALIASES.get(text.strip().lower())
    if action is None:
        raise InputValidationError(f"Unrecognized action: {text.strip()!r}")
    return action


def _parse_int(text: str, name: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise InputValidationError(f"{name} must be a whole number, got {text!r}") from None


def _parse_real(text: str, name: str):
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        raise InputValidationError(f"{name} must be a number, got {text!r}") from None


def _ask(prompt: str, stdin, stdout):
    """Prints a prompt and returns the stripped reply, or None at end of input."""
    print(prompt, file=stdout)
    line = stdin.readline()
    if not line:
        return None
    return line.strip()


def prompt_command(action: Action, grid_size: int, stdin, stdout):
    """
    Collects the parameters for an edit. Returns None if the input ends
    before the command is complete.
    """
    answers = []
    prompts = [
        f"Enter the center X coordinate (0-{grid_size - 1}):",
        f"Enter the center Z coordinate (0-{grid_size - 1}):",
        "Enter the radius of the area to modify:",
    ]
    if action is Action.ELEVATE:
        prompts.append("Enter the strength of the elevation (e.g., 1.0 for small, 10.0 for large):")
    elif action is Action.DEPRESS:
        prompts.append("Enter the strength of the depression (e.g., 1.0 for small, 10.0 for large):")

    for prompt in prompts:
        reply = _ask(prompt, stdin, stdout)
        if reply is None:
            return None
        answers.append(reply)

    center_x = _parse_int(answers[0], "Center X")
    center_z = _parse_int(answers[1], "Center Z")
    radius = _parse_real(answers[2], "Radius")
    if action is Action.FLATTEN:
        return EditCommand(EditKind.FLATTEN, center_x, center_z, radius)
    strength = _parse_real(answers[3], "Strength")
    return EditCommand(_EDIT_KINDS[action], center_x, center_z, radius, strength)


def _save(generator, output_path: str, preview_path, stdout) -> bool:
    try:
        saved_path = generator.save(output_path, preview_path=preview_path)
    except ExportError as e:
        logger.error(f"Saving terrain failed: {e}", exc_info=True)
        print(f"Failed to save terrain: {e}", file=stdout)
        return False
    print(f"Terrain saved as {saved_path}", file=stdout)
    return True


def run_menu(generator, output_path: str, stdin, stdout, preview_path: str = None) -> bool:
    """
    Runs the edit loop until the user saves or the input ends. The session
    ends after a save attempt whether or not it succeeded.

    Returns:
        bool: True if the terrain was saved.
    """
    while True:
        reply = _ask(MENU_PROMPT, stdin, stdout)
        if reply is None:
            logger.warning("Input ended before the terrain was saved.")
            return False

        try:
            action = parse_action(reply)
        except InputValidationError as e:
            print(f"Invalid action. {e}", file=stdout)
            continue

        if action is Action.SAVE_AND_EXIT:
            return _save(generator, output_path, preview_path, stdout)

        try:
            command = prompt_command(action, generator.size, stdin, stdout)
            if command is None:
                logger.warning("Input ended before the terrain was saved.")
                return False
            touched = generator.apply(command)
        except InputValidationError as e:
            logger.info(f"Rejected {action.value} command: {e}")
            print(f"Invalid input: {e}", file=stdout)
            continue

        print(f"{action.value.capitalize()} applied to {touched} cells.", file=stdout)

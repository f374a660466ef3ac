from enum import Enum


KEYDOWN = "KEYDOWN"
KEYUP = "KEYUP"
KEYPRESS = "KEYPRESS"

KEY_ACTIONS = (KEYDOWN, KEYUP, KEYPRESS)


class Button(Enum):
    """
    Buttons of the virtual remote, as (codeset, code). Some firmware revisions
    use different codes for the D-pad; those are listed in ALTERNATE_CODES.
    """

    SEEK_FWD = (2, 0)
    SEEK_BACK = (2, 1)
    PAUSE = (2, 2)
    PLAY = (2, 3)

    DOWN = (3, 0)
    LEFT = (3, 1)
    UP = (3, 8)
    RIGHT = (3, 7)
    OK = (3, 2)

    BACK = (4, 0)
    SMARTCAST = (4, 3)
    CC_TOGGLE = (4, 4)
    INFO = (4, 6)
    MENU = (4, 8)
    HOME = (4, 15)

    VOLUME_DOWN = (5, 0)
    VOLUME_UP = (5, 1)
    MUTE_OFF = (5, 2)
    MUTE_ON = (5, 3)
    MUTE_TOGGLE = (5, 4)

    PIC_MODE = (6, 0)
    PIC_SIZE = (6, 2)

    INPUT_NEXT = (7, 1)

    CHANNEL_DOWN = (8, 0)
    CHANNEL_UP = (8, 1)
    CHANNEL_PREV = (8, 2)

    EXIT = (9, 0)

    POWER_OFF = (11, 0)
    POWER_ON = (11, 1)
    POWER_TOGGLE = (11, 2)

    @property
    def codeset(self):
        return self.value[0]

    @property
    def code(self):
        return self.value[1]

    @property
    def alternate_code(self):
        return ALTERNATE_CODES.get(self)

    @property
    def is_directional(self):
        return self in DIRECTIONAL


DIRECTIONAL = frozenset((Button.DOWN, Button.LEFT, Button.UP, Button.RIGHT))

ALTERNATE_CODES = {
    Button.UP: 3,
    Button.RIGHT: 5,
}


def key_event(action, button, code=None):
    """
    Return the KEYLIST entry for one button event. `code` overrides the
    button's primary code.
    """
    if action not in KEY_ACTIONS:
        raise ValueError("Unknown key action %r" % (action,))
    return dict(
        CODESET=button.codeset,
        CODE=button.code if code is None else code,
        ACTION=action,
    )

"""
Errors raised by the version algebra.
"""

__all__ = [
    "ParseError",
]


class ParseError(ValueError):
    """Malformed version, range or spec text."""

    def __init__(self, msg, text=None, pos=None):
        if text is not None:
            msg = '{msg}: {text!r}'.format(**locals())
            if pos is not None:
                msg += ' (at {pos})'.format(**locals())
        super(ParseError, self).__init__(msg)
        self.text = text
        self.pos = pos

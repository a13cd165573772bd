"""Exceptions raised by walkerchoice."""


class InvalidInput(ValueError):
    """Weight vector that cannot define a discrete distribution."""

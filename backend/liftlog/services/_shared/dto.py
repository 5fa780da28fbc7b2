# comments in English; reST docstrings strict
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DeletedOut:
    """
    Acknowledgement returned by delete operations.

    :param id: Primary key of the removed row.
    :type id: int
    """

    id: int

#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""stmuart tagged enumeration.

Enumeration members carry a numeric tag (the wire value), a human-readable
label and an optional description. Members of different enumerations never
compare equal, even when they share a tag.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from typing_extensions import Self

from stmuart.exceptions import StmUartError


class StmUartKeyError(StmUartError, KeyError):
    """Enumeration member lookup failed."""


@dataclass(frozen=True)
class StmEnumMember:
    """stmuart Enum member representation.

    Holds the numeric tag, human-readable label and optional description of a
    single enumeration member.
    """

    tag: int
    label: str
    description: Optional[str] = None


class StmEnum(StmEnumMember, Enum):
    """Enumeration with tag/label lookup.

    A member compares equal to its own tag and label, so ``CommonCommand.GET == 0``
    holds. Comparing two enumeration members is identity based: the same opcode
    byte in two different command sets gives two distinct members.
    """

    def __eq__(self, __value: object) -> bool:
        """Check equality of enum value with another object.

        :param __value: Object to compare with this enum value.
        :return: True if the object is this member, or equals its tag or label.
        """
        if isinstance(__value, Enum):
            return self is __value
        return self.tag == __value or self.label == __value

    def __hash__(self) -> int:
        """Calculate hash value for the enum instance.

        :return: Hash value as integer.
        """
        return hash((type(self).__name__, self.tag, self.label))

    def __str__(self) -> str:
        """Get the member label followed by its tag in hex.

        :return: String in ``Label(0xNN)`` form.
        """
        return f"{self.label}({self.tag:#04x})"

    @classmethod
    def labels(cls) -> list[str]:
        """Get list of labels of all enum members.

        :return: List of all labels.
        """
        return [value.label for value in cls.__members__.values()]

    @classmethod
    def tags(cls) -> list[int]:
        """Get list of tags of all enum members.

        :return: List of all tags.
        """
        return [value.tag for value in cls.__members__.values()]

    @classmethod
    def contains(cls, obj: Union[int, str]) -> bool:
        """Check if member with given tag/label exists in enum.

        :param obj: Label or tag of enum member to check for existence.
        :return: True if member exists, False otherwise.
        """
        try:
            cls.from_attr(obj)
            return True
        except StmUartKeyError:
            return False

    @classmethod
    def from_attr(cls, attribute: Union[int, str]) -> Self:
        """Get enum member with given tag/label attribute.

        :param attribute: Tag value (int) or label value (str) of the enum member to find.
        :return: Found enum member matching the given attribute.
        """
        if isinstance(attribute, int):
            return cls.from_tag(attribute)
        return cls.from_label(attribute)

    @classmethod
    def from_tag(cls, tag: int) -> Self:
        """Get enum member with given tag.

        :param tag: Tag to be used for searching
        :raises StmUartKeyError: If enum with given tag is not found
        :return: Found enum member
        """
        for item in cls.__members__.values():
            if item.tag == tag:
                return item
        raise StmUartKeyError(f"There is no {cls.__name__} item with tag {tag:#x} defined")

    @classmethod
    def from_label(cls, label: str) -> Self:
        """Get enum member with given label (case-insensitive).

        :param label: Label to be used for searching
        :raises StmUartKeyError: If enum with given label is not found or label is not string
        :return: Found enum member
        """
        if not isinstance(label, str):
            raise StmUartKeyError("Label must be string")
        for item in cls.__members__.values():
            if item.label.upper() == label.upper():
                return item
        raise StmUartKeyError(f"There is no {cls.__name__} item with label {label} defined")

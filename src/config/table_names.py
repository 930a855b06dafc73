from enum import Enum


class TableNames(str, Enum):
    TEMPLATES = "templates"
    INVITATIONS = "invitations"
    GUESTS = "guests"

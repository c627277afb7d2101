from enum import StrEnum, auto

from pymongo import ReturnDocument


class ReturnDocumentOption(StrEnum):
	""" Which version of the document a find-and-modify call hands back. Values match the `returnDocument` request option. """
	BEFORE = auto()
	AFTER = auto()

	def to_pymongo(self) -> bool:
		return ReturnDocument.AFTER if self is ReturnDocumentOption.AFTER else ReturnDocument.BEFORE

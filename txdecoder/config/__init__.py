"""
Configuration for the decoder service.

Environment-driven settings live in env; the static program allow-list lives
in programs.
"""

from txdecoder.config.programs import PROGRAM_MAPPINGS, ProgramInfo, get_program  # noqa: F401

__all__ = ["PROGRAM_MAPPINGS", "ProgramInfo", "get_program"]

"""
Allow-listed programs: program ID -> display name and IDL URL.

Only instructions owned by these programs are decoded; everything else is
reported as UNKNOWN_PROGRAM.
"""

from __future__ import annotations

from dataclasses import dataclass

_IDL_BASE_URL = "https://raw.githubusercontent.com/jup-ag/jupiter-lend/refs/heads/main/target/idl"


@dataclass(frozen=True)
class ProgramInfo:
    """Display name and Anchor IDL location for one program."""

    name: str
    idl_url: str


PROGRAM_MAPPINGS: dict[str, ProgramInfo] = {
    "jupeiUmn818Jg1ekPURTpr4mFo29p46vygyykFJ3wZC": ProgramInfo(
        name="LIQUIDITY_PROGRAM",
        idl_url=f"{_IDL_BASE_URL}/liquidity.json",
    ),
    "jup3YeL8QhtSx1e253b2FDvsMNC87fDrgQZivbrndc9": ProgramInfo(
        name="LENDING_PROGRAM",
        idl_url=f"{_IDL_BASE_URL}/lending.json",
    ),
    "jup7TthsMgcR9Y3L277b8Eo9uboVSmu1utkuXHNUKar": ProgramInfo(
        name="LRRM_PROGRAM",
        idl_url=f"{_IDL_BASE_URL}/lending_reward_rate_model.json",
    ),
    "jupnw4B6Eqs7ft6rxpzYLJZYSnrpRgPcr589n5Kv4oc": ProgramInfo(
        name="ORACLE_PROGRAM",
        idl_url=f"{_IDL_BASE_URL}/oracle.json",
    ),
    "jupr81YtYssSyPt8jbnGuiWon5f6x9TcDEFxYe3Bdzi": ProgramInfo(
        name="VAULTS_PROGRAM",
        idl_url=f"{_IDL_BASE_URL}/vaults.json",
    ),
}


def get_program(program_id: str | None) -> ProgramInfo | None:
    """Return the mapping for program_id, or None when not allow-listed."""
    if not program_id:
        return None
    return PROGRAM_MAPPINGS.get(program_id)

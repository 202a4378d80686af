# app/alert_engine/prophylaxis.py
"""
Colonization -> empiric neutropenic-fever plan.

The patient's colonization is stored as one delimited string ("KPC+NDM",
"VRE, ESBL"); everything here works on the parsed code tuple instead.
"""
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

_SEPARATORS = re.compile(r"[,+]")


@dataclass(frozen=True)
class EmpiricPlan:
    code: str
    recommendation: str
    add_on: bool = False  # added on top of the base regimen instead of replacing it


STANDARD_REGIMEN = "Cefepime padrão (+ Vancomicina se indicação clínica)"

EMPIRIC_PLANS = {
    plan.code: plan
    for plan in (
        EmpiricPlan("KPC", "KPC: Meropenem + Polimixina + HMC"),
        EmpiricPlan("NDM", "NDM: Polimixina (ou CAZ-AVI + Aztreonam) + HMC"),
        EmpiricPlan("ESBL", "ESBL: Meropenem"),
        EmpiricPlan("VRE", "VRE: acrescentar Linezolida ou Daptomicina", add_on=True),
    )
}


def parse_colonization(value: Optional[str]) -> Tuple[str, ...]:
    """Split on ',' or '+', normalise case, drop blanks and repeats (first wins)."""
    if not value:
        return ()
    codes: List[str] = []
    for part in _SEPARATORS.split(value):
        code = part.strip().upper()
        if code and code not in codes:
            codes.append(code)
    return tuple(codes)


def join_colonization(codes: Iterable[str]) -> Optional[str]:
    """Storage form of a code set."""
    joined = "+".join(codes)
    return joined or None


def empiric_plan(codes: Iterable[str]) -> List[str]:
    """
    Each code is looked up on its own; unknown codes (and negative swabs)
    contribute nothing. The standard regimen is kept unless some code
    replaces it.
    """
    plans = [EMPIRIC_PLANS[code] for code in codes if code in EMPIRIC_PLANS]

    recommendations: List[str] = []
    if all(plan.add_on for plan in plans):
        recommendations.append(STANDARD_REGIMEN)
    for plan in plans:
        if plan.recommendation not in recommendations:
            recommendations.append(plan.recommendation)
    return recommendations

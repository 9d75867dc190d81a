from __future__ import annotations
import json, logging, pathlib
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from rapidfuzz import process, fuzz, utils as fuzz_utils

from .schemas import ClosingThreshold, MeritRecord, Program, ProgramOption
from .utils import average

log = logging.getLogger(__name__)

class UnknownProgramError(KeyError):
    pass

# camelCase keys used by exported program/merit-history documents
_PROGRAM_KEYS = {"disciplineGroup": "discipline_group"}
_MERIT_KEYS = {
    "programId": "program_id",
    "meritListNumber": "round_number",
    "closingMeritPosition": "closing_position",
    "closingAggregate": "closing_aggregate",
}

def _rename(raw: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, Any]:
    return {mapping.get(k, k): v for k, v in raw.items()}

@dataclass
class ProgramCatalog:
    """Read-only view over program reference data and closing history."""
    programs: Dict[str, Program] = field(default_factory=dict)
    history: List[MeritRecord] = field(default_factory=list)
    fuzzy_cutoff: int = 60

    @classmethod
    def build(cls, programs: Iterable[Program], history: Iterable[MeritRecord] = (),
              fuzzy_cutoff: int = 60) -> "ProgramCatalog":
        return cls({p.id: p for p in programs}, list(history), fuzzy_cutoff)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], fuzzy_cutoff: int = 60) -> "ProgramCatalog":
        programs = [Program.model_validate(_rename(p, _PROGRAM_KEYS)) for p in data.get("programs", [])]
        history = [MeritRecord.model_validate(_rename(m, _MERIT_KEYS)) for m in data.get("meritHistory", [])]
        return cls.build(programs, history, fuzzy_cutoff)

    @classmethod
    def load_json(cls, path: pathlib.Path, fuzzy_cutoff: int = 60) -> "ProgramCatalog":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f), fuzzy_cutoff)

    def __len__(self) -> int:
        return len(self.programs)

    # -------------------------------------------------------
    # Programs
    # -------------------------------------------------------
    def get(self, program_id: str) -> Program:
        try:
            return self.programs[program_id]
        except KeyError:
            raise UnknownProgramError(program_id) from None

    def find(self, text: str) -> Optional[Program]:
        """Fuzzy match free text against program names."""
        if not self.programs:
            return None
        names = {pid: p.name for pid, p in self.programs.items()}
        match = process.extractOne(text, names, scorer=fuzz.WRatio, processor=fuzz_utils.default_process)
        if not match or match[1] < self.fuzzy_cutoff:
            log.debug("no program matches %r", text)
            return None
        return self.programs[match[2]]

    # -------------------------------------------------------
    # Closing history
    # -------------------------------------------------------
    def _records(self, program_id: str) -> List[MeritRecord]:
        return [m for m in self.history if m.program_id == program_id and m.closing_aggregate is not None]

    def _by_year(self, program_id: str) -> Dict[int, List[MeritRecord]]:
        years = defaultdict(list)
        for m in self._records(program_id):
            years[m.year].append(m)
        return years

    @staticmethod
    def _final(records: List[MeritRecord]) -> MeritRecord:
        # the last listed round closes lowest; undated entries count as the final one
        return max(records, key=lambda m: m.round_number if m.round_number is not None else float("inf"))

    def latest_closing(self, program_id: str) -> Optional[float]:
        years = self._by_year(program_id)
        if not years:
            return None
        return self._final(years[max(years)]).closing_aggregate

    def average_closing(self, program_id: str, years: int = 3) -> Optional[float]:
        by_year = self._by_year(program_id)
        recent = sorted(by_year, reverse=True)[:years]
        return average([self._final(by_year[y]).closing_aggregate for y in recent])

    def thresholds(self, program_id: str, year: Optional[int] = None) -> List[ClosingThreshold]:
        """Per-round closings for one year (latest by default). Entries without a round are skipped."""
        by_year = self._by_year(program_id)
        if not by_year:
            return []
        year = year if year is not None else max(by_year)
        rows = [m for m in by_year.get(year, []) if m.round_number]
        return [
            ClosingThreshold(round_number=m.round_number,
                             closing_aggregate=m.closing_aggregate,
                             closing_position=m.closing_position)
            for m in sorted(rows, key=lambda m: m.round_number)
        ]

    def options(self, program_ids: Optional[Iterable[str]] = None) -> List[ProgramOption]:
        ids = list(program_ids) if program_ids is not None else list(self.programs)
        return [
            ProgramOption(**self.get(pid).model_dump(), last_year_closing_aggregate=self.latest_closing(pid))
            for pid in ids
        ]

from __future__ import annotations
import logging, warnings
from typing import Any, Dict, Iterable, Optional, Union

from .aggregate import calculate_aggregate, validate_payload
from .catalog import ProgramCatalog
from .config import load_config
from .models import generate_preference_list, predict_chance, predict_merit_list, recommend_net_score
from .models.merit_list import LinearDecayLadder
from .schemas import EquivalenceCurriculum, LocalCurriculum, UserInterests

log = logging.getLogger(__name__)

class AdmissionScorer:
    """Binds configuration and a program catalog to the scoring functions.

    Returns plain dicts, ready for whatever request layer sits on top.
    Logging is left to the application: call config.setup_logging(cfg["log_level"]).
    """
    def __init__(self, catalog: Optional[ProgramCatalog] = None, cfg_path: Optional[str] = None):
        self.cfg = load_config(cfg_path)
        self.ladder = LinearDecayLadder.from_config(self.cfg)
        self.catalog = catalog if catalog is not None else ProgramCatalog()
        self.catalog.fuzzy_cutoff = int(self.cfg.get("fuzzy_match_cutoff", self.catalog.fuzzy_cutoff))
        if not len(self.catalog):
            warnings.warn("program catalog is empty; only aggregate() will be useful")

    def aggregate(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        score_input, validation = validate_payload(raw)
        if not validation.is_valid:
            return {"success": False, "error": "Validation failed", "errors": validation.errors}
        result = calculate_aggregate(score_input)
        return {"success": True, "result": {**result.model_dump(), "is_equivalence": result.is_equivalence}}

    def predict(self, user_aggregate: float, program_id: str,
                curriculum: Optional[Union[LocalCurriculum, EquivalenceCurriculum]] = None) -> Dict[str, Any]:
        program = self.catalog.get(program_id)
        closing = self.catalog.latest_closing(program_id)

        chance = predict_chance(user_aggregate, closing, program.name)

        thresholds = self.catalog.thresholds(program_id)
        if len(thresholds) < 2 and closing is not None:
            log.info("using synthetic merit-list ladder for %s", program_id)
            thresholds = self.ladder(closing)
        merit = predict_merit_list(user_aggregate, thresholds, program.name)

        net = None
        if curriculum is not None and closing is not None:
            net = recommend_net_score(closing, curriculum, program.name).model_dump()

        return {
            "success": True,
            "program": program.model_dump(include={"id", "name", "campus", "school"}),
            "last_year_closing_aggregate": closing,
            "chance_prediction": chance.model_dump(),
            "merit_list_prediction": merit.model_dump(),
            "net_recommendation": net,
        }

    def preferences(self, user_aggregate: float, interests: Optional[UserInterests] = None,
                    program_ids: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        options = self.catalog.options(program_ids)
        return generate_preference_list(user_aggregate, options, interests, self.ladder).model_dump()

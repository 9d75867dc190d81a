from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, conint

# -------------------------------------------------------
# Score input (ranges are checked by aggregate.validate_score_input)
# -------------------------------------------------------
class LocalCurriculum(BaseModel):
    """FSc/HSSC student: two school components."""
    kind: Literal["local"] = "local"
    hsc_percentage: float
    ssc_percentage: float

class EquivalenceCurriculum(BaseModel):
    """O/A Level student: one equivalence percentage covers the school share."""
    kind: Literal["equivalence"] = "equivalence"
    equivalence_percentage: Optional[float] = None

Curriculum = Annotated[Union[LocalCurriculum, EquivalenceCurriculum], Field(discriminator="kind")]

class ScoreInput(BaseModel):
    net_score: float
    curriculum: Curriculum

class ValidationResult(BaseModel):
    is_valid: bool
    errors: List[str] = []

# -------------------------------------------------------
# Results
# -------------------------------------------------------
class AggregateBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["local", "equivalence"]
    net_contribution: float
    hsc_contribution: float = 0.0
    ssc_contribution: float = 0.0
    equivalence_contribution: Optional[float] = None
    total_aggregate: float
    explanation: str = ""

    @property
    def is_equivalence(self) -> bool:
        return self.kind == "equivalence"

ChanceCategory = Literal["High Chance", "Medium Chance", "Low Chance", "Very Low Chance"]

class ChanceMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_aggregate: float
    reference_closing_aggregate: Optional[float] = None
    difference: Optional[float] = None
    data_available: bool

class ChancePrediction(BaseModel):
    model_config = ConfigDict(frozen=True)

    chance_percentage: int = Field(ge=0, le=100)
    category: ChanceCategory
    explanation: str
    tips: List[str]
    metadata: ChanceMetadata

Confidence = Literal["High", "Medium", "Low"]

class ClosingThreshold(BaseModel):
    model_config = ConfigDict(frozen=True)

    round_number: int = Field(gt=0)
    closing_aggregate: Optional[float] = None
    closing_position: Optional[int] = None

class MeritListPrediction(BaseModel):
    model_config = ConfigDict(frozen=True)

    predicted_round: Optional[int] = None
    confidence: Confidence
    explanation: str
    alternative_rounds: List[int] = []
    is_estimate: bool

class NetScoreRequirement(BaseModel):
    model_config = ConfigDict(frozen=True)

    required_net_score: int
    required_net_percentage: float
    achievable: bool

Achievability = Literal["Easy", "Moderate", "Challenging", "Very Challenging", "Not Achievable"]

class NetScoreScenario(BaseModel):
    model_config = ConfigDict(frozen=True)

    net_score: int
    resulting_aggregate: float
    chance_category: ChanceCategory
    chance_percentage: int
    description: str

class NetScoreRecommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    minimum_net_score: int
    recommended_net_score: int
    target_net_score: int
    max_net_score: int
    achievability: Achievability
    explanation: str
    scenarios: List[NetScoreScenario]

# -------------------------------------------------------
# Reference data
# -------------------------------------------------------
class Program(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    campus: str
    school: str
    discipline_group: str
    seats: Optional[int] = None

class ProgramOption(Program):
    last_year_closing_aggregate: Optional[float] = None

class MeritRecord(BaseModel):
    """One historical closing entry for a program/year/round."""
    model_config = ConfigDict(frozen=True)

    program_id: str
    year: int
    round_number: Optional[int] = None
    closing_position: Optional[int] = None
    closing_aggregate: Optional[float] = None

# -------------------------------------------------------
# Preference list
# -------------------------------------------------------
RiskCategory = Literal["Safe", "Moderate", "Ambitious"]
RiskTolerance = Literal["Conservative", "Moderate", "Aggressive"]

class UserInterests(BaseModel):
    # 1..5, 0 means unrated
    discipline_scores: Dict[str, conint(ge=0, le=5)] = {}
    preferred_campuses: List[str] = []
    risk_tolerance: RiskTolerance = "Moderate"

class PreferenceItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    rank: int = 0
    program: ProgramOption
    risk_category: RiskCategory
    chance_percentage: int
    predicted_round: Optional[int] = None
    interest_score: float
    combined_score: float
    reasoning: str

class RiskGroups(BaseModel):
    model_config = ConfigDict(frozen=True)

    safe: List[PreferenceItem] = []
    moderate: List[PreferenceItem] = []
    ambitious: List[PreferenceItem] = []

class PreferenceSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_programs: int = 0
    safe_count: int = 0
    moderate_count: int = 0
    ambitious_count: int = 0
    average_chance: float = 0.0

class PreferenceListResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    ranked_list: List[PreferenceItem] = []
    by_risk: RiskGroups = RiskGroups()
    summary: PreferenceSummary = PreferenceSummary()
    recommendations: List[str] = []

from .chance import predict_chance, predict_chance_from_position, chance_from_difference
from .merit_list import LinearDecayLadder, generate_estimated_thresholds, predict_merit_list
from .net_score import recommend_net_score, required_net_score
from .preference import export_preference_list_as_text, generate_preference_list

__all__ = [
    "predict_chance", "predict_chance_from_position", "chance_from_difference",
    "LinearDecayLadder", "generate_estimated_thresholds", "predict_merit_list",
    "recommend_net_score", "required_net_score",
    "export_preference_list_as_text", "generate_preference_list",
]

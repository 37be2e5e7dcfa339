"""Calendar arithmetic and the GDD maturity estimator."""
from growbydate.phenology.maturity import (
    start_total_before_doy,
    find_maturity_doy,
    available_gdd_before_frost,
    latest_planting_doy_to_mature_before_frost,
    risk_label,
    estimate_crop,
    CropEstimate,
    RiskAssessment,
)

__all__ = [
    "start_total_before_doy",
    "find_maturity_doy",
    "available_gdd_before_frost",
    "latest_planting_doy_to_mature_before_frost",
    "risk_label",
    "estimate_crop",
    "CropEstimate",
    "RiskAssessment",
]

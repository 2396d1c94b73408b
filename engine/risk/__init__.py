from engine.risk.scoring import score as score_risk

__all__ = ["score_risk"]

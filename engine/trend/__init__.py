from engine.trend.analysis import analyze as analyze_trend

__all__ = ["analyze_trend"]

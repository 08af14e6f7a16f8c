from site_audit.models import PerformanceTiming


def analyze_performance(performance: PerformanceTiming, threshold_ms: int) -> list[str]:
    # dom_content_loaded_ms is advisory and never produces an issue
    if performance.load_time_ms > threshold_ms:
        return [f"Slow page load time (>{threshold_ms / 1000:g} seconds)"]
    return []

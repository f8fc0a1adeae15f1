from app.services.streak import check_day_cleared, claim_daily, current_date, next_streak

__all__ = ["check_day_cleared", "claim_daily", "current_date", "next_streak"]

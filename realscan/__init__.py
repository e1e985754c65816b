"""REALSCAN — short-lived numeric access codes for scanner check-in."""

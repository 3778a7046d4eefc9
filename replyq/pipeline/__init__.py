"""The user-triggered reply pipeline: locate -> resolve -> compose -> generate -> inject."""

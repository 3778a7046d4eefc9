"""Gmail and Google People API access for the reply pipeline."""

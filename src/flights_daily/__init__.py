"""Daily flight counts: calendar features, baseline fits and residual analysis."""

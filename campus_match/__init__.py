"""Campus Match - resume-to-job match scoring with a score cache."""

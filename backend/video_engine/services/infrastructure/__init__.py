"""Infrastructure - providers, job storage, orchestration and publishing."""

"""Generational onboarding engine: signal extraction, follow-up orchestration and cohort classification."""

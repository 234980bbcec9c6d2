"""Pipeline: the perceive -> reason -> act coordinator."""

from npcagency.pipeline.coordinator import AgentPipeline, PipelineOutcome

__all__ = ["AgentPipeline", "PipelineOutcome"]

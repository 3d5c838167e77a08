"""
Pipeline step that adds live search context when the conversation needs it.
"""
from __future__ import annotations

from botc.response.engine import PipelineContext, PipelineStep
from botc.response.grounding import GroundingAdvisor


class GroundingStep(PipelineStep):
    def __init__(self, advisor: GroundingAdvisor) -> None:
        self.advisor = advisor

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.grounding = await self.advisor.context_for(context.history)
        return context

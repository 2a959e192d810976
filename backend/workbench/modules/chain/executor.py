"""Chain Executor — runs the agent chain strictly in order.

Pure Python controller around the model client:

  initial input -> Agent 1 -> output 1 -> Agent 2 -> ... -> Agent N

Each agent receives only the previous agent's output as its single user
message. An invocation error ends the run; agents after the failing one are
never called and nothing is retried.

States: idle -> running -> completed | failed, back to running on the next
start. Every completed step is appended to the workspace run log and
emitted as a ChainEvent before the next agent is invoked.
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator

import structlog

from workbench.modules.agents.client import ModelClient, provider_for_model
from workbench.modules.agents.cost_tracker import CostTracker
from workbench.modules.agents.schemas import AgentDefinition
from workbench.modules.chain.schemas import ChainEvent, ChainRunResult
from workbench.modules.workspace.schemas import RunLogEntry
from workbench.modules.workspace.state import ChainBusyError, Workspace

logger = structlog.get_logger()

INTERRUPTED_MESSAGE = "Chain run interrupted before completion"


class ChainExecutor:
    """Drives one chain run against a workspace."""

    def __init__(
        self,
        workspace: Workspace,
        client: ModelClient,
        cost_tracker: CostTracker | None = None,
    ) -> None:
        self.workspace = workspace
        self.client = client
        self.cost_tracker = cost_tracker or CostTracker()

    def stream(self, initial_input: str | None = None) -> AsyncIterator[ChainEvent]:
        """Return the step events of a new run.

        A busy workspace raises ChainBusyError here. The run itself starts
        on first iteration, so a stream that is closed or dropped unread
        never leaves the workspace running.
        """
        if self.workspace.is_running:
            raise ChainBusyError("A chain run is already in progress")
        current_input = self.workspace.raw_text if initial_input is None else initial_input
        agents = self.workspace.registry.snapshot()
        return self._execute(agents, current_input)

    async def run(self, initial_input: str | None = None) -> ChainRunResult:
        """Run the whole chain and return the aggregated result."""
        run_id = 0
        async for event in self.stream(initial_input):
            run_id = event.run_id
        return ChainRunResult(
            run_id=run_id,
            status=self.workspace.status,
            run_log=list(self.workspace.run_log),
            metrics=self.workspace.metrics,
            error=self.workspace.error,
            usage=self.cost_tracker.summary(),
        )

    async def _execute(
        self,
        agents: list[AgentDefinition],
        current_input: str,
    ) -> AsyncIterator[ChainEvent]:
        token = self.workspace.begin_run()
        total = len(agents)
        try:
            yield ChainEvent(type="started", run_id=token, total=total)

            for index, agent in enumerate(agents):
                logger.info(
                    f"Chain: agent [{index + 1}/{total}]",
                    agent=agent.name,
                    model=agent.model,
                    input_chars=len(current_input),
                )
                start = time.monotonic()
                try:
                    result = await self.client.invoke(
                        model=agent.model,
                        system_prompt=agent.system_prompt,
                        temperature=agent.parameters.temperature,
                        max_output_tokens=agent.parameters.max_output_tokens,
                        input_text=current_input,
                    )
                except Exception as exc:
                    message = f"{agent.name} failed: {exc}"
                    logger.error(
                        "Chain: agent invocation failed",
                        agent=agent.name,
                        index=index,
                        error=str(exc),
                        exc_info=True,
                    )
                    if self.workspace.fail_run(token, message):
                        yield ChainEvent(
                            type="failed",
                            run_id=token,
                            index=index,
                            total=total,
                            error=message,
                            metrics=self.workspace.metrics,
                        )
                    return
                latency = time.monotonic() - start

                entry = RunLogEntry(
                    agent_name=agent.name,
                    model=agent.model,
                    output=result.text or "",
                    latency=latency,
                    input_tokens=result.input_tokens,
                    output_tokens=result.output_tokens,
                )
                if not self.workspace.append_entry(token, entry):
                    return

                self.cost_tracker.record(
                    result.provider or provider_for_model(agent.model),
                    agent.model,
                    agent_name=agent.name,
                    input_tokens=result.input_tokens,
                    output_tokens=result.output_tokens,
                    duration_ms=result.duration_ms,
                )

                # Taken before yielding: observers may edit the entry.
                current_input = entry.output

                yield ChainEvent(type="step", run_id=token, index=index, total=total, entry=entry)

            if self.workspace.complete_run(token):
                yield ChainEvent(
                    type="completed",
                    run_id=token,
                    total=total,
                    metrics=self.workspace.metrics,
                )
        finally:
            # Consumer went away (or the task was cancelled) mid-run.
            if self.workspace.is_current(token):
                self.workspace.fail_run(token, INTERRUPTED_MESSAGE)

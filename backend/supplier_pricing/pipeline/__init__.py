"""
Price update pipeline — job lifecycle, handoff types and the orchestrator.

    context.py       transient types passed between parser, validator, orchestrator
    state.py         guarded job status transitions
    errors.py        PipelineError hierarchy
    orchestrator.py  JobOrchestrator (claim → parse → validate → stage)

Import from the submodules directly; the orchestrator pulls in the
parser and repositories, which themselves import from this package.
"""

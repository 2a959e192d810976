"""Regulatory review agent chain.

4-agent architecture, executed strictly in order, each agent reading the
previous agent's output:
  Agent 1 — RequirementExtractor: structured requirement list
  Agent 2 — GapAnalyzer:          coverage / gap classification
  Agent 3 — EvidenceMapper:       traceability matrix
  Agent 4 — ChecklistFormatter:   reviewer checklist + executive summary
"""

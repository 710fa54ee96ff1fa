"""Built-in workflow: how Maven Flow drives autonomous development."""

from __future__ import annotations

from flowreveal.graph.spec import (
    ColorTag,
    EdgeSpec,
    GraphSpec,
    NoteSpec,
    Phase,
    Position,
    Step,
)

PRD_NOTE = """docs/prd.json
{
  "projectName": "My App",
  "branchName": "feature/auth",
  "stories": [
    {
      "id": "US-001",
      "title": "Add user authentication",
      "priority": 1,
      "passes": false,
      "acceptanceCriteria": [...]
    }
  ]
}"""

AGENTS_NOTE = """Maven 10-Step Workflow:

🟢 development-agent
• Step 1: Import UI/create from scratch
• Step 2: npm → pnpm
• Step 7: Data layer
• Step 9: MCP integrations

🔵 refactor-agent
• Step 3: Feature-based structure
• Step 4: Modularize components
• Step 6: Centralize UI components

🟣 quality-agent
• Step 5: Type safety, @ aliases
• ZERO TOLERANCE: No 'any', no gradients

🔴 security-agent
• Step 8: Firebase + Supabase auth
• Step 10: Security & error handling"""

HOOKS_NOTE = """Automated Quality Hooks:

PostToolUse Hook:
• Checks after every Write/Edit
• 🚨 BLOCKS: 'any' types
• 🚨 BLOCKS: Gradients
• Flags: Relative imports
• Flags: Large components

Stop Hook:
• Runs before completing work
• Comprehensive codebase scan
• Blocks commit on violations
• Creates fix agent tasks"""

ARCHITECTURE_NOTE = """Feature-Based Architecture:

src/
├── app/                    # Entry points
├── features/               # Isolated modules
│   ├── auth/              # Cannot import from
│   ├── dashboard/         # other features
│   └── [feature-name]/
├── shared/                # Shared code
│   ├── ui/                # @shared/ui
│   ├── api/               # Backend clients
│   └── utils/
└── [type: "app"]

Rules:
• Features → Cannot import from other features
• Use @shared/*, @features/* aliases
• NO relative imports
• NO gradients (solid colors only)"""


def maven_flow() -> GraphSpec:
    steps = [
        # Entry & setup (left column)
        Step("1", "Run /flow start", "User initiates Maven Flow", Phase.ENTRY, Position(50, 20)),
        Step("2", "Load PRD", "Read docs/prd.json for stories", Phase.SETUP, Position(50, 130)),
        Step("3", "Read Progress", "Load docs/progress.txt for patterns", Phase.SETUP, Position(50, 240)),
        Step(
            "4",
            "flow-iteration agent (🟡)",
            "Main coordinator picks story",
            Phase.COORDINATION,
            Position(50, 360),
        ),
        # Specialist agents
        Step(
            "5a",
            "development-agent (🟢)",
            "Steps 1,2,7,9: Foundation, pnpm, data, MCP",
            Phase.AGENTS,
            Position(400, 320),
            agent="development-agent",
            color=ColorTag.GREEN,
        ),
        Step(
            "5b",
            "refactor-agent (🔵)",
            "Steps 3,4,6: Structure, modularize, UI",
            Phase.AGENTS,
            Position(400, 420),
            agent="refactor-agent",
            color=ColorTag.BLUE,
        ),
        Step(
            "5c",
            "quality-agent (🟣)",
            "Step 5: Type safety, @ aliases, NO gradients",
            Phase.AGENTS,
            Position(400, 520),
            agent="quality-agent",
            color=ColorTag.PURPLE,
        ),
        Step(
            "5d",
            "security-agent (🔴)",
            "Steps 8,10: Auth flow, security audit",
            Phase.AGENTS,
            Position(400, 620),
            agent="security-agent",
            color=ColorTag.RED,
        ),
        # Implementation (right column)
        Step("6", "Implement Story", "Agents coordinate to implement", Phase.LOOP, Position(800, 320)),
        Step("7", "Quality Hooks", "PostToolUse: Check any types, gradients", Phase.LOOP, Position(800, 430)),
        Step("8", "Stop Hook", "Pre-commit: Comprehensive check", Phase.LOOP, Position(800, 540)),
        Step("9", "Commit Changes", "feat: [Story ID] - [Title]", Phase.LOOP, Position(800, 650)),
        Step("10", "Update PRD", "Set passes: true in docs/prd.json", Phase.LOOP, Position(800, 760)),
        Step("11", "Log Progress", "Append learnings to docs/progress.txt", Phase.LOOP, Position(800, 870)),
        # Decision & exit
        Step("12", "All stories complete?", "Check if all passes: true", Phase.DECISION, Position(400, 870)),
        Step("13", "FLOW_COMPLETE", "All stories implemented", Phase.DONE, Position(400, 990)),
    ]

    edges = [
        EdgeSpec("1", "2", "bottom", "top"),
        EdgeSpec("2", "3", "bottom", "top"),
        EdgeSpec("3", "4", "bottom", "top"),
        # Coordinator fans out to the agents
        EdgeSpec("4", "5a", "right", "left"),
        EdgeSpec("4", "5b", "right", "left"),
        EdgeSpec("4", "5c", "right", "left"),
        EdgeSpec("4", "5d", "right", "left"),
        EdgeSpec("5a", "6", "right", "left"),
        EdgeSpec("5b", "6", "right", "left"),
        EdgeSpec("5c", "6", "right", "left"),
        EdgeSpec("5d", "6", "right", "left"),
        EdgeSpec("6", "7", "bottom", "top"),
        EdgeSpec("7", "8", "bottom", "top"),
        EdgeSpec("8", "9", "bottom", "top"),
        EdgeSpec("9", "10", "bottom", "top"),
        EdgeSpec("10", "11", "bottom", "top"),
        EdgeSpec("11", "12", "bottom", "left"),
        # Loop back for the next story
        EdgeSpec("12", "4", "top", "bottom", label="More stories"),
        EdgeSpec("12", "13", "bottom", "top", label="All done"),
    ]

    notes = [
        NoteSpec("note-prd", 2, Position(550, 80), ColorTag.AMBER, PRD_NOTE),
        NoteSpec("note-agents", 5, Position(600, 330), ColorTag.GREEN, AGENTS_NOTE),
        NoteSpec("note-hooks", 7, Position(850, 550), ColorTag.PINK, HOOKS_NOTE),
        NoteSpec("note-architecture", 6, Position(100, 500), ColorTag.VIOLET, ARCHITECTURE_NOTE),
    ]

    return GraphSpec.build(
        title="How Maven Flow Works",
        subtitle="Autonomous AI development system with coordinated specialist agents",
        steps=steps,
        edges=edges,
        notes=notes,
    )

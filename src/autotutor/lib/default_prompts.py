"""Prompt builders for repository analysis and tutorial writing.

Each builder embeds bounded excerpts of the loaded file contents; the excerpt
counts and lengths keep a single request well inside model input limits.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

SETUP_FILE_MARKERS = ("package.json", "requirements.txt", "readme.md", "setup.py")


def format_excerpts(
    contents: Mapping[str, str],
    *,
    max_chars: int,
    limit: int | None = None,
) -> str:
    """Render ``path:\\ncontent`` blocks, truncating each file to *max_chars*."""
    items = list(contents.items())
    if limit is not None:
        items = items[:limit]
    return "\n\n".join(f"{path}:\n{text[:max_chars]}" for path, text in items)


def overview_prompt(
    repo_info: Mapping[str, Any],
    structure: Mapping[str, Any],
    contents: Mapping[str, str],
) -> str:
    languages = ", ".join(structure.get("languages", {}))
    return f"""Analyze the following software repository in depth and respond in a structured JSON format. Base the analysis on the code files, project configuration and any manifest-like content provided (for Expo or React Native apps, read app.json for the application name).

Your response must include these keys:
purpose - the overall purpose and primary functionality: what the application does, the problems it solves and its main features.
technology_stack - a list of technologies, frameworks and programming languages used.
architecture_type - the kind of software (web application, mobile application, command-line tool, library, ...).
target_audience - who the application is for.
complexity_level - beginner, intermediate or advanced.
complexity_reasoning - why that complexity level was chosen, based on structure, libraries, patterns and features.
apk_name - the application name from app.json (expo.name or expo.slug) if applicable.
android_package - the android.package value if applicable.
flows - an object keyed by feature name; each value has "description" and "steps" (at least four steps describing the user or system flow, including UI or backend actions).

Repository metadata:
Repository name: {repo_info.get("name", "")}
Total files: {structure.get("total_files", 0)}
Languages used: {languages}

Key file content (partial excerpts):
{format_excerpts(contents, max_chars=1000, limit=3)}

Respond only with the JSON object.
"""


def relationships_prompt(contents: Mapping[str, str]) -> str:
    return f"""Analyze the following files to understand the structure, behavior and interactions within the application.

1. Entry points: the file(s) that start execution.
2. Key components: the significant modules, classes or functions, each with its purpose and role.
3. Data flow (at least 10 lines): data sources, how data is transformed, the intermediate structures or services involved, and the resulting outputs or side effects. Be specific about data types and direction.
4. File dependencies: direct and indirect dependencies between files (imports, shared utilities, cross-module references).

Files to analyze:
{format_excerpts(contents, max_chars=800)}

Return a JSON object with these keys:
{{
  "entry_points": [{{"file": "path", "description": "why it is an entry point"}}],
  "key_components": ["component and its role"],
  "data_flow": [{{"flow": "name", "steps": ["step"]}}],
  "dependencies": {{"path": ["paths it depends on"]}}
}}"""


def components_prompt(contents: Mapping[str, str]) -> str:
    return f"""Perform a technical analysis of the code below. Identify the key components (functions, classes, modules, hooks, middleware, ...) and for each give:

name - exact component name.
type - the kind of component.
file - the file path where it is defined.
what - what it does: core logic, key behaviors, side effects.
why - why it matters to the application.
how - how it works with other components, data/event flow and lifecycle.
inputs - parameters, props, arguments or external dependencies.
outputs - return values, rendered UI, emitted events or side effects.
testingStrategy - the most important test cases and whether unit, integration or end-to-end tests apply.

Analyze only components found in these snippets:
{format_excerpts(contents, max_chars=1200, limit=5)}

Return JSON using this schema:
{{
  "components": [
    {{
      "name": "string",
      "type": "string",
      "file": "string",
      "what": "string",
      "why": "string",
      "how": "string",
      "inputs": "string",
      "outputs": "string",
      "testingStrategy": "string"
    }}
  ]
}}
"""


def setup_files(contents: Mapping[str, str]) -> dict[str, str]:
    """Subset of *contents* that describes installation and runtime setup."""
    return {
        path: text
        for path, text in contents.items()
        if any(marker in path.lower() for marker in SETUP_FILE_MARKERS)
    }


def setup_prompt(repo_info: Mapping[str, Any], contents: Mapping[str, str]) -> str:
    name = repo_info.get("name", "")
    return f"""You are given excerpts from the software repository {name}. Analyze its installation and runtime setup using the dependency and documentation files provided (package.json, requirements.txt, README.md, setup.py).

Explain:
prerequisites - language versions, system dependencies, package managers and tools required before setup.
running_instructions - step-by-step commands to install dependencies and run the application, including setup scripts and configuration steps.
flows - the setup and runtime initialization flow: which files and scripts run, which configuration files are read, and which environment variables are required.

Repository: {name}
Use only the contents of these files:
{format_excerpts(setup_files(contents), max_chars=1000)}

Return a JSON object with the top-level keys: prerequisites, running_instructions, flows.
"""


def markdown_tutorial_prompt(data: Mapping[str, Any]) -> str:
    return f"""Write complete, professional Markdown documentation for the repository described by the JSON below. Use clear headings, subheadings, bullet points and code blocks. Keep the tone informative and concise for developers, contributors and automated readers.

Convert every part of the JSON into readable documentation without omitting sections, and keep the relationships between components.

JSON data:
{json.dumps(data, indent=2)}

Structure:
# Project title and repository info (name, owner, URL, application name if any, generation date)
## Overview (purpose, audience, architecture type, complexity with reasoning)
## Features and user flows (one subsection per flow with its steps)
## Architecture and file structure (entry points, file count, languages, the file tree as a code block, how directories are organized)
## Key components (name and file, type, what, why, how, inputs and outputs)
## Data flow (step-by-step for each flow)
## Setup and installation (prerequisites, install and run commands)
## Setup and runtime flow (initial setup, development server, runtime, platform specifics)

Output only valid Markdown. Avoid repetition.
"""

"""News Curator - agent workflow runner

Simple CLI for running the curation pipeline against the stub provider.
"""

import argparse
import asyncio

from curator.agents.workflow import AgentWorkflow
from curator.models.settings import load_settings
from curator.tools.search_provider import StubContentProvider


async def run_workflow(settings_path: str, articles_per_task: int = 2):
    """Run the workflow for the given settings file."""
    settings = load_settings(settings_path)
    print(f"Business fields: {', '.join(f.value for f in settings.business_fields()) or '-'}")
    print("-" * 50)

    workflow = AgentWorkflow(settings, provider=StubContentProvider(articles_per_task))

    async for event in workflow.stream():
        event_type = event.event.value
        data = event.data

        if event_type == "stage_started":
            print(f"\n[~] Starting {data.get('stage')} stage...")

        elif event_type == "stage_completed":
            marker = "+" if data.get("success", True) else "!"
            details = {k: v for k, v in data.items() if k not in ("stage", "success")}
            print(f"  [{marker}] {data.get('stage')} complete {details or ''}")

        elif event_type == "task_status":
            print(f"  [.] {data.get('task_id')} ({data.get('business_field')}): {data.get('status')}")

        elif event_type == "warning":
            print(f"  [?] {data.get('message')}")

        elif event_type == "workflow_complete":
            print(f"\n[*] Workflow Complete!")
            print(f"   Runtime: {data.get('runtime_ms')}ms")
            print(f"   Accepted articles: {data.get('articles')}")

        elif event_type == "error":
            print(f"\n[!] Error: {data.get('message', 'Unknown error')}")

    result = workflow.result
    if result is not None and result.success:
        print(f"\n{'='*50}")
        print("REPORT:")
        print(f"{'='*50}")
        print(result.data["report"].narrative)
        analysis = result.data.get("competitor_analysis")
        if analysis is not None:
            print("COMPETITORS:")
            for stats in analysis.competitors:
                print(f"  {stats.name}: {stats.total_mentions} mention(s), sentiment {stats.average_sentiment:+.2f}")
            for recommendation in analysis.recommendations:
                print(f"  - {recommendation}")


def main():
    parser = argparse.ArgumentParser(description="News Curator agent workflow")
    parser.add_argument("--settings", "-s", required=True, help="Path to a settings JSON file")
    parser.add_argument(
        "--articles-per-task",
        "-n",
        type=int,
        default=2,
        help="Synthetic articles the stub provider returns per task",
    )

    args = parser.parse_args()

    asyncio.run(run_workflow(args.settings, args.articles_per_task))


if __name__ == "__main__":
    main()

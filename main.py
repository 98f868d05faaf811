import argparse
import asyncio
import json
import os
import sys
from typing import List

from tqdm import tqdm

from tribunal.errors import ValidationError
from tribunal.llm_engine import LLMEngine
from tribunal.pipeline import build_session
from tribunal.schema import StepStatus, TribunalState, Verdict
from tribunal.verifiers.adversarial_witness import AdversarialWitness
from utils.logger import setup_logger

logger = setup_logger("TribunalCLI")

STATUS_TEXT = {
    StepStatus.PENDING: "",
    StepStatus.RUNNING: "...",
    StepStatus.COMPLETED: "Completed",
    StepStatus.FAILED: "FAILED",
    StepStatus.SKIPPED: "Skipped (due to earlier failure)",
}

EXIT_PROCEED = 0
EXIT_HALT = 1
EXIT_REJECTED = 2


def print_report(state: TribunalState):
    print("\n" + "=" * 60)
    print(f"Claim Under Review: {state.claim}")
    print("-" * 60)
    for index, step in enumerate(state.steps, start=1):
        print(f"{index:>2}. {step.label.upper():<28} {STATUS_TEXT[step.status]}")
        if step.status is StepStatus.FAILED:
            print(f"    Failure Reason: {state.failure_reason}")
    print("-" * 60)
    print(f"VERDICT: {state.verdict.value if state.verdict else 'PENDING'}")
    print("=" * 60)


async def judge_claim(session, claim: str, show_progress: bool = True) -> TribunalState:
    bar = tqdm(total=len(session.sequencer.definitions), desc="Tribunal", disable=not show_progress)
    seen = set()

    def on_change(state: TribunalState):
        for step in state.steps:
            if step.status.is_terminal and step.id not in seen:
                seen.add(step.id)
                bar.set_postfix_str(f"{step.label}: {step.status.value}")
                bar.update(1)

    unsubscribe = session.subscribe(on_change)
    try:
        return await session.run(claim)
    finally:
        unsubscribe()
        bar.close()


def load_claims(path: str) -> List[str]:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Claims file not found at {path}")
    with open(path, 'r', encoding='utf-8') as f:
        claims = json.load(f)
    if not isinstance(claims, list) or not all(isinstance(c, str) for c in claims):
        raise ValueError(f"{path} must contain a JSON list of strings")
    return claims


async def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run a claim through the tribunal.")
    parser.add_argument("claim", nargs="?", help="claim under review")
    parser.add_argument("--claims-file", help="JSON list of claims, judged one after the other")
    parser.add_argument("--model", help="oracle model id")
    parser.add_argument("--base-url", help="OpenAI-compatible base URL of the oracle")
    parser.add_argument("--timeout", type=float, help="oracle timeout in seconds")
    parser.add_argument("--json", action="store_true", help="print the read model as JSON")
    args = parser.parse_args(argv)

    if args.claims_file:
        claims = load_claims(args.claims_file)
    elif args.claim is not None:
        claims = [args.claim]
    else:
        parser.error("a claim or --claims-file is required")

    engine = LLMEngine(model=args.model, base_url=args.base_url, timeout=args.timeout)
    session = build_session(witness=AdversarialWitness(engine))

    results = []
    for claim in claims:
        try:
            state = await judge_claim(session, claim, show_progress=not args.json)
        except ValidationError as e:
            logger.error(f"Claim rejected: {e}")
            results.append((claim, None))
            continue
        results.append((claim, state))
        if args.json:
            print(json.dumps(state.to_dict(), indent=2))
        else:
            print_report(state)

    if len(claims) > 1 and not args.json:
        print(f"\n{'VERDICT':<10} | CLAIM")
        print("-" * 60)
        for claim, state in results:
            label = state.verdict.value if state and state.verdict else "REJECTED"
            print(f"{label:<10} | {claim}")

    if any(state is None for _, state in results):
        return EXIT_REJECTED
    if any(state.verdict is not Verdict.PROCEED for _, state in results):
        return EXIT_HALT
    return EXIT_PROCEED


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

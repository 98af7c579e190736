"""
Warm-start the agents on simulated hiring outcomes.

Candidates are drawn from weighted profile tiers; each is decided by the
agent and the simulated outcome is learned, so day-1 behaviour reflects a
plausible applicant pool instead of the bare composite-score prior.

Usage:
    python manage.py seed_q_table
    python manage.py seed_q_table --samples 5000 --agent all
    python manage.py seed_q_table --reset  # Clear learned state first
"""
from django.core.management.base import BaseCommand

from screening.services.agents import AGENT_TYPES, STRATEGY_CLASSES
from screening.services.registry import get_registry
from screening.services.simulation import simulate_candidates


class Command(BaseCommand):
    help = "Pre-train the agents on simulated hiring outcomes"

    def add_arguments(self, parser):
        parser.add_argument(
            "--samples", type=int, default=1000,
            help="Number of simulated candidates per agent",
        )
        parser.add_argument(
            "--seed", type=int, default=42,
            help="Seed for the candidate simulator",
        )
        parser.add_argument(
            "--agent", default="rl", choices=AGENT_TYPES + ("all",),
            help="Agent to train; 'all' trains every standalone agent",
        )
        parser.add_argument(
            "--reset", action="store_true",
            help="Clear the agent's learned state before training",
        )

    def handle(self, *args, **options):
        registry = get_registry()
        agent_types = list(STRATEGY_CLASSES) if options["agent"] == "all" else [options["agent"]]

        for agent_type in agent_types:
            agent = registry.agent(agent_type)
            if options["reset"]:
                registry.reset(agent_type)
                self.stdout.write(f"Cleared learned state of {agent_type} agent.")

            for candidate in simulate_candidates(options["samples"], options["seed"]):
                decision = agent.evaluate(candidate.vector)
                agent.train(
                    candidate.vector,
                    decision.decision,
                    candidate.worked_out,
                    candidate.performance_rating,
                )
            registry.persist(agent_type)

            insights = agent.insights()
            summary = f"accuracy {insights['accuracy']:.1f}% over {insights['totalTraining']} outcomes"
            if "qTableSize" in insights:
                summary += f", Q-table entries: {insights['qTableSize']}"
            self.stdout.write(self.style.SUCCESS(
                f"Trained {agent_type} agent on {options['samples']} simulated candidates: {summary}"
            ))

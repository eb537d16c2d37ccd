import time, argparse

from americano.models.config import ScheduleConfig
from americano.solver.montecarlo import generate_schedule_monte_carlo
from americano.solver.scoring import total_schedule_cost
from americano.solver.simulator import synthetic_roster

parser = argparse.ArgumentParser()
parser.add_argument("--players", type=int, default=12)
parser.add_argument("--courts", type=int, default=3)
parser.add_argument("--rounds", type=int, default=10)
parser.add_argument("--iterations", type=int, default=200)
parser.add_argument("--seed", type=int, default=123)
args = parser.parse_args()

cfg = ScheduleConfig(player_ids=synthetic_roster(args.players), courts=args.courts, total_rounds=args.rounds)
t0 = time.time()
schedule = generate_schedule_monte_carlo(cfg, iterations=args.iterations, seed=args.seed)
dt = time.time() - t0
info = schedule.info
print(f"Time: {dt:.3f}s | Cost: {total_schedule_cost(schedule, cfg.player_ids)} | Iterations: {info.iterations} "
      f"| Optimal: {info.use_optimal} | Backtrack nodes: {info.total_backtrack_calls} | Budget hits: {info.budget_exhausted_count}")

import matplotlib.pyplot as plt
import numpy as np


def plot_counters(model):
    """Time series of the run-wide counters collected every cycle."""
    df = model.datacollector.get_model_vars_dataframe()

    fig, axes = plt.subplots(2, 2, figsize=(12, 8))

    ax = axes[0][0]
    ax.plot(df["Time"], df["OccupiedSpaces"], color="#444444", label="Occupied")
    ax.plot(df["Time"], df["WaitingRequesters"], color="#aa0000", label="Waiting")
    ax.plot(df["Time"], df["ParkedEmergencies"], color="#0077bb", label="Parked emergencies")
    ax.set_title("Occupancy")
    ax.legend()

    ax = axes[0][1]
    ax.plot(df["Time"], df["SpotsToGenuine"], color="#00aa00", label="Genuine")
    ax.plot(df["Time"], df["SpotsToLowLiars"], color="#ffcc66", label="Low-priority liars")
    ax.plot(df["Time"], df["SpotsToHighLiars"], color="#ff4444", label="High-priority liars")
    ax.set_title("Spots allocated")
    ax.legend()

    ax = axes[1][0]
    ax.plot(df["Time"], df["LiarCost"], color="#ff4444", label="Liar cost")
    ax.plot(df["Time"], df["TransferredByNormal"], color="#0077bb", label="Transferred (h)")
    ax.set_title("Financial impact")
    ax.legend()

    ax = axes[1][1]
    ax.plot(df["Time"], df["Refusals"], color="#888888", label="Refusals")
    ax.plot(df["Time"], df["RefusedForParking"], color="#aa0000", label="Refused parking")
    ax.plot(df["Time"], df["FlaggedCars"], color="orange", label="Flagged")
    ax.set_title("Negotiation outcomes")
    ax.legend()

    for ax in axes.flat:
        ax.set_xlabel("hours")
        ax.grid(alpha=0.3)

    fig.tight_layout()
    plt.show()


def plot_preset_comparison(results):
    """Grouped bars of the spot allocation per preset. results: {name: summary}"""
    names = list(results)
    x = np.arange(len(names))
    width = 0.25

    genuine = [results[n]["spots_to_genuine_emergencies"] for n in names]
    low = [results[n]["spots_to_low_priority_liars"] for n in names]
    high = [results[n]["spots_to_high_priority_liars"] for n in names]

    plt.figure(figsize=(12, 5))
    plt.bar(x - width, genuine, width, color="#00aa00", label="Genuine")
    plt.bar(x, low, width, color="#ffcc66", label="Low-priority liars")
    plt.bar(x + width, high, width, color="#ff4444", label="High-priority liars")
    plt.xticks(x, names, rotation=30, ha="right")
    plt.ylabel("Spots allocated")
    plt.title("Spot allocation per experiment")
    plt.grid(alpha=0.3, axis="y")
    plt.legend()
    plt.tight_layout()
    plt.show()

import pandas as pd
import matplotlib.pyplot as plt


def snapshots_to_frame(snapshots):
    df = pd.DataFrame(snapshots, columns=["inserted", "fill_ratio", "observed_fp_rate", "expected_fp_rate"])
    return df.set_index("inserted").sort_index()


def plot_rates(df, ax):
    ax.plot(df.index, df["observed_fp_rate"], marker='o', linewidth=2, label="Observed FP rate")
    ax.plot(df.index, df["expected_fp_rate"], linestyle='--', linewidth=2, label="Expected FP rate")
    ax.set_xlabel("Items inserted")
    ax.set_ylabel("False positive rate")


def plot_fill(df, ax):
    ax.plot(df.index, df["fill_ratio"], color='grey', linewidth=1, alpha=0.7, label="Fill ratio")
    ax.set_ylabel("Fill ratio")
    ax.set_ylim(0, 1)


def plot_false_positive_rate(snapshots, title=None, save_path=None):
    df = snapshots_to_frame(snapshots)
    fig, ax = plt.subplots(figsize=(11, 6))
    plot_rates(df, ax)
    ax_fill = ax.twinx()
    plot_fill(df, ax_fill)
    ax.set_title(title or "False Positive Rate While Filling the Filter")
    lines, labels = ax.get_legend_handles_labels()
    fill_lines, fill_labels = ax_fill.get_legend_handles_labels()
    ax.legend(lines + fill_lines, labels + fill_labels, loc='upper left', fontsize=8, frameon=False)
    fig.tight_layout()
    if save_path:
        fig.savefig(save_path)
        plt.close(fig)
    else:
        plt.show()
    return df

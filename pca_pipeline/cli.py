# pca_pipeline/cli.py

import argparse
import logging
import sys
from pathlib import Path

from pca_pipeline.config import DEFAULT_COMPONENT_PAIRS, AnalysisConfig, PlotStyle
from pca_pipeline.errors import PCAPipelineError
from pca_pipeline.processor import run_pipeline

logger = logging.getLogger("pca_pipeline")


def _parse_pair(text: str) -> tuple[int, int]:
    try:
        a, b = (int(v) for v in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a pair like '1,2', got '{text}'") from None
    return a, b


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pca-centroids",
        description="PCA of a metabolomics table with per-group centroid plots."
    )
    ap.add_argument("input_path", help="CSV/TSV/Excel table, one row per sample")
    ap.add_argument("--group-column", default=None, help="Group label column (default: first column)")
    ap.add_argument("--id-column", default=None, help="Optional sample id column")
    ap.add_argument("--sheet", default=0, help="Excel sheet name or index")
    ap.add_argument("--encoding", default="utf-8", help="Text encoding of delimited files, e.g. latin-1")
    ap.add_argument("--no-center", action="store_true", help="Do not subtract column means")
    ap.add_argument("--no-scale", action="store_true", help="Do not scale columns to unit variance")
    ap.add_argument("--components", type=int, default=3, help="Components averaged into centroids")
    ap.add_argument("--pairs", nargs="+", type=_parse_pair,
                    default=list(DEFAULT_COMPONENT_PAIRS), help="Component pairs to plot, e.g. 1,2 1,3")
    ap.add_argument("--out-dir", default="pca_output", help="Directory for CSV and HTML output")
    ap.add_argument("--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    sheet = int(args.sheet) if str(args.sheet).isdigit() else args.sheet
    config = AnalysisConfig(
        input_path=args.input_path,
        center=not args.no_center,
        scale=not args.no_scale,
        n_components_retained=args.components,
        group_column_name=args.group_column,
        id_column_name=args.id_column,
        component_pairs_to_plot=args.pairs,
        sheet_name=sheet,
        encoding=args.encoding,
    )

    try:
        result = run_pipeline(config)
        # plotting lives with the app; imported late so the pipeline stays plot-free
        from interface.plotting.plot_pca import build_centroid_plots
        plots = build_centroid_plots(result, config.component_pairs_to_plot, PlotStyle())
    except (PCAPipelineError, OSError) as e:
        logger.error("Analysis failed: %s", e)
        return 1

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    result.pca.scores.to_csv(out_dir / "scores.csv")
    result.centroids.to_csv(out_dir / "centroids.csv")
    result.merged.to_csv(out_dir / "merged.csv")
    result.pca.variance_summary().to_csv(out_dir / "explained_variance.csv", index=False)

    for (a, b), fig in plots:
        path = out_dir / f"PC{a}_vs_PC{b}.html"
        fig.write_html(path, include_plotlyjs="cdn")
        logger.info("Wrote %s", path)

    logger.info("Results written to %s", out_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())

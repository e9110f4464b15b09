# cbirkit

cbirkit ranks a folder of images by how closely each one resembles a target
image. It provides several matching methods:

- direct pixel comparison
- colour histograms of the whole image or of image regions
- Fourier-spectrum features
- Gabor-filter histograms
- HOG descriptors
- precomputed deep-network embeddings

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

```
cbirkit <directory> <top_n> <task_number> <embeddings> [--results DIR] [--target-dir DIR]
```

- `directory`: the folder of images to search. Only regular files ending in
  `.jpg`, `.png`, `.ppm` or `.tif` are read, in sorted order.
- `top_n`: the number of best matches to print and save.
- `task_number`: the matching method (see the table below).
- `embeddings`: a CSV file with one image per line. Each line is a file name
  followed by the values of its feature vector, separated by commas. Only
  tasks 5, 51, 6 and 7 read this file, but the argument is always required.
- `--results`: the folder that receives the saved images. The default is
  `results`.
- `--target-dir`: the folder that holds the target images. If it is not
  given, `directory` is used.

Every task uses a fixed target file name:

| Task | Target |
|------|--------|
| 1, 31, 32 | `pic.1016.jpg` |
| 2, 21, 3, 51, 8 | `pic.0164.jpg` |
| 4 | `pic.0535.jpg` |
| 41 | `pic.0628.jpg` |
| 42, 7 | `pic.0746.jpg` |
| 5 | `pic.0893.jpg` |
| 6 | `pic.1072.jpg` |
| 9 | `pic.0280.jpg` |

The command prints how long the task took and then the ranked matches with
their scores. It saves the target as `target_task_<task>.jpg` and the top
matches as `match_task_<task>_<rank>.jpg` in the results folder.

The exit status is 1 in three cases: the task number is unknown, the target
image cannot be read, or a task needs an embedding for the target and the
file has none. In all other cases the exit status is 0.

### Tasks

| Task | Method | Order |
|------|--------|-------|
| 1  | Sum of squared differences over the 7×7 centre block | ascending |
| 2  | 16×16 rg-chromaticity histogram intersection | descending |
| 21 | 8×8×8 colour histogram intersection | descending |
| 3  | Whole-image and centred half-size region colour histograms, averaged | descending |
| 31 | Centred-region colour histogram, plus hue–saturation histogram (whole target against lower half of each candidate) | descending |
| 32 | Two colour histograms of the top half of the rows, averaged | descending |
| 4  | Colour histogram averaged with the "magnitude" histogram, which is also a colour histogram of the image | descending |
| 41 | 16×16 log-magnitude Fourier spectrum, Euclidean distance | ascending |
| 42 | Prints energy, entropy, contrast and homogeneity of the target's horizontal co-occurrence matrix; ranks nothing | — |
| 5, 51 | Cosine distance between embeddings | ascending |
| 6  | Prints embedding scores next to colour-histogram scores; ranks nothing | both ascending |
| 7  | Average of Gabor-histogram cosine distance and embedding cosine distance | ascending |
| 8  | HOG descriptors of 64×128 gray copies, Euclidean distance; also prints the top matches | ascending |
| 9  | Colour histogram and lower-half hue–saturation histogram intersections, averaged | ascending |

A distance is lower for closer matches. A histogram intersection is higher
for closer matches. Tasks 2, 21, 3, 31, 32 and 4 put the highest
intersection first. Task 9 sorts its intersection scores in ascending
order.

## Library use

```python
from cbirkit.imaging import load_image
from cbirkit.histograms import generate_rgb_histogram
from cbirkit.distances import histogram_intersection_3d

a = generate_rgb_histogram(load_image("a.jpg", False), 8)
b = generate_rgb_histogram(load_image("b.jpg", False), 8)
print(histogram_intersection_3d(a, b))
```

Colour images are `uint8` NumPy arrays of shape `(height, width, 3)` in
blue, green, red order. Gray images have shape `(height, width)`.

### Modules

- `cbirkit.imaging`
  - `load_image` and `save_image` read and write image files.
  - `bgr_to_gray` and `bgr_to_hsv` convert colours.
  - `resize` scales images with bilinear interpolation.
  - `normalize_minmax` rescales values to a range.
- `cbirkit.files`
  - `read_files` lists the images in a folder.
  - `read_embeddings` reads the embeddings CSV.
  - `extract_filename` returns the last part of a path.
  - `save_matched_images` writes the target and its matches to a folder.
- `cbirkit.distances`
  - `ssd` computes the sum of squared differences.
  - `histogram_intersection` and `histogram_intersection_3d` compare 2-D and 3-D histograms.
  - `cosine_distance` compares two vectors.
- `cbirkit.histograms`
  - `generate_histogram` builds the rg-chromaticity histogram.
  - `generate_rgb_histogram` builds a colour histogram of the whole image.
  - `generate_centered_region_histogram`, `generate_histogram_top` and `generate_histogram_bot` build colour histograms of image regions.
  - `generate_hue_saturation_histogram` builds a hue–saturation histogram.
  - Every histogram is rescaled to the range 0 to 1.
- `cbirkit.texture`
  - Sobel filters and gradient magnitude.
  - Fourier features.
  - Co-occurrence matrices and `TextureFeatures`.
  - Laws filters and their energy histograms.
  - `gabor_kernel` and `compute_gabor_histogram`.
  - `calculate_gradient_magnitude`.
- `cbirkit.hog`
  - `extract_hog_features` computes a HOG descriptor with 64×128 windows, 16×16 blocks, 8×8 cells and 9 bins.
  - `match_hog_features` compares two descriptors by Euclidean distance.
- `cbirkit.pipeline`
  - `pipeline` runs one task and returns `(path, score)` pairs in ranked order.
  - It raises `PipelineError` when a task cannot run.

## What it does not do

cbirkit does not compute deep-network embeddings. Tasks 5, 51, 6 and 7 only
read vectors that already exist in the CSV file. It has no graphical
viewer. To look at the results, open the saved images in the results folder.
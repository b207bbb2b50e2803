# softraster

A small software rasterizer written in plain Python with no dependencies.
Triangles go through model, view, projection and viewport matrices. They are
rasterized over their screen-space bounding box with barycentric weights and a
depth buffer. Each pixel is shaded from a texture and a point light with
ambient, diffuse and specular terms. The frame can be written out as a 24-bit
BMP image.

## Installation

```
pip install .
```

## The demo command

```
softraster-demo
```

This renders five rotated, textured cubes onto a dark blue background and
writes the picture to `demo_output.bmp`. It prints its progress as each cube is
drawn. Options:

- `-o`, `--output PATH`: the BMP file to write. The default is `demo_output.bmp`.
- `--width N`, `--height N`: the image size in pixels. Both must be positive.
  The defaults are 1024 and 768.

The command exits with status 1 if the file cannot be written.

## Using the library

```python
from softraster.linalg import Matrix4, Vec3, look_at, perspective
from softraster.model import Model
from softraster.renderer import Renderer
from softraster.texture import Color, Texture

width, height = 320, 240
renderer = Renderer(width, height)
renderer.view_matrix = look_at(Vec3(3, 2, 5), Vec3(0, 0, 0), Vec3(0, 1, 0))
renderer.projection_matrix = perspective(45.0, width / height, 0.1, 100.0)

viewport = Matrix4()
viewport[0, 0] = viewport[0, 3] = width / 2
viewport[1, 1] = viewport[1, 3] = height / 2
renderer.viewport_matrix = viewport

renderer.texture = Texture.create_default(256, 256)
renderer.clear(Color(30, 30, 60))
renderer.clear_depth()   # the depth buffer starts at 0, so clear it before drawing

model = Model.from_file("cube.obj")
model.center()
model.scale(0.5)

renderer.render_model(model)
renderer.save_image("out.bmp")
```

### `softraster.linalg`

- `Vec2` and `Vec3` are frozen dataclasses. They support `+`, `-`, `*` by a
  number and `/` by a number. `Vec3 * Vec3` multiplies component by component.
  Both also have `norm()`, `normalize()` and `dot()`, and `Vec3` has `cross()`.
  Division by zero gives `inf` or `nan` and does not raise.
- `Matrix4` is a 4x4 row-major matrix. A new matrix is the identity, which
  `Matrix4.identity()` also returns. It is indexed as `m[i, j]` and combined
  with `@`. `m @ v` with a `Vec3`, which is the same as `transform_point`,
  applies the matrix with w = 1 and divides by the resulting w.
- The helpers:
  - `perspective(fov, aspect, near, far)`, with `fov` in degrees.
  - `look_at(eye, center, up)`.
  - `translate(v)`, `rotate(angle, axis)` with `angle` in degrees, and `scale(v)`.
  - `transpose(m)`.
  - `inverse(m)`, which inverts rigid transforms only (rotation plus translation).
  - `clamp(value, low, high)` and `lerp(a, b, t)`, which works for numbers and vectors.

### `softraster.texture`

- `Color(r, g, b, a=255)` is an 8-bit colour.
  - `to_vec3()` gives RGB in the 0..1 range.
  - `Color.from_vec3(v)` clamps to 0..1 and returns an opaque colour.
- `Texture(width, height, pixels)` holds the pixels row by row from the top.
  - `Texture.from_bytes(data)` and `Texture.from_file(path)` decode
    uncompressed 24-bit BMP images with a 54-byte header. They raise
    `ValueError` for anything else or for truncated data.
  - `Texture.create_default(w, h)` builds a grey radial gradient.
  - `sample(u, v)` and `sample_vec3(u, v)` wrap the coordinates and filter
    bilinearly. An empty texture samples as magenta.
  - `get_pixel(x, y)` returns black outside the texture. `set_pixel` ignores
    writes outside the texture.

### `softraster.model`

- `Model.parse(text)` and `Model.from_file(path)` read Wavefront OBJ text. They
  take `v`, `vn` and `vt` lines and `f` lines in the `v`, `v/vt`, `v//vn` and
  `v/vt/vn` forms. Only the first three corners of a face are used. A corner
  without a normal gets the face normal computed from its positions. Malformed
  numbers or indices raise `ValueError`.
- `model.vertices` is the list of resolved `Vertex(position, normal,
  tex_coord)` entries, three per face. `face_count()` gives the number of
  faces. `face_vertices(i)` returns one face's three vertices and raises
  `IndexError` when `i` is out of range.
- `bounding_box()` returns `(min, max)`. `center()` moves the model onto the
  origin, and `scale(factor)` scales it about the origin.

### `softraster.renderer`

- `Renderer(width, height)` holds a frame buffer of `Pixel(color, depth)`
  entries and a separate depth buffer.
- Its settings are plain attributes:
  - `model_matrix`, `view_matrix`, `projection_matrix` and `viewport_matrix`.
  - `texture`, which may be `None` for plain white.
  - `light_position`, `light_color`, `light_intensity` and `ambient_intensity`.
- `normal_matrix` is computed once from the identity model matrix when the
  renderer is created. It is not updated when `model_matrix` changes.
- `clear(color)` and `clear_depth()` reset the two buffers.
- `render_triangle(v0, v1, v2)` skips triangles whose view-space winding faces
  away from the camera. `render_model(model)` draws every triangle of a model.
- `color_buffer()`, `to_bmp()` and `save_image(path)` give the result.
  `save_image` raises `OSError` on failure.
- `barycentric(a, b, c, p)` is available on its own. It returns `(1, 0, 0)`
  for a degenerate triangle.

### `softraster.demo`

- `cube_vertices()` returns the 36 flat-shaded vertices of a cube.
- `render_demo(width, height)` renders the demo scene and returns the
  `Renderer`.
- `main(argv)` is the `softraster-demo` command.

## What it does not do

- There is no interactive window or live viewer. Pictures are rendered
  off-screen and saved as BMP files.
- Only uncompressed 24-bit BMP images are read and written. Other image
  formats are not supported.
- OBJ faces with more than three corners are not triangulated. Only their
  first triangle is kept.

## Running the tests

```
pip install .[test]
pytest
```
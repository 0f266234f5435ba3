"""Core isogeny machinery: torsion bases, Velu, endomorphisms, kernels, walks."""

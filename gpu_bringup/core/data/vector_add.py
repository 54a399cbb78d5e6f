"""
L0 Data — CUDA source of the compute probe workload.

A fixed 1024-element vector addition (1.0 + 2.0) run on every visible
device, one device at a time. Every runtime call is checked; a failing
device records its diagnostic and the loop moves on to the next one.

The program prints one line per device that the harness parses:

    probe-result gpu=<index> status=PASS
    probe-result gpu=<index> status=FAIL detail=<text>
"""

from __future__ import annotations

VECTOR_ADD_ELEMENTS = 1024
RESULT_PREFIX = "probe-result"

# @ELEMENTS@ and @RESULT_PREFIX@ are filled in below.
_SOURCE_TEMPLATE = r"""
#include <stdio.h>
#include <stdlib.h>
#include <cuda_runtime.h>

#define N @ELEMENTS@

static char g_detail[512];

#define CUDA_CHECK(call)                                                      \
    do {                                                                      \
        cudaError_t _err = (call);                                            \
        if (_err != cudaSuccess) {                                            \
            snprintf(g_detail, sizeof(g_detail), "%s at line %d (%s)",        \
                     cudaGetErrorString(_err), __LINE__, #call);              \
            goto fail;                                                        \
        }                                                                     \
    } while (0)

__global__ void vector_add(const float *a, const float *b, float *c, int n) {
    int i = blockIdx.x * blockDim.x + threadIdx.x;
    if (i < n) c[i] = a[i] + b[i];
}

static int test_device(int dev) {
    const size_t size = N * sizeof(float);
    float *h_a = NULL, *h_b = NULL, *h_c = NULL;
    float *d_a = NULL, *d_b = NULL, *d_c = NULL;
    cudaDeviceProp prop;
    int threads = 256;
    int blocks = (N + threads - 1) / threads;
    int passed = 1;

    g_detail[0] = '\0';

    CUDA_CHECK(cudaSetDevice(dev));
    CUDA_CHECK(cudaGetDeviceProperties(&prop, dev));
    printf("  GPU %d: %s (sm_%d%d, %lu MB, %d SMs)\n", dev, prop.name,
           prop.major, prop.minor,
           (unsigned long)(prop.totalGlobalMem / (1024 * 1024)),
           prop.multiProcessorCount);

    h_a = (float *)malloc(size);
    h_b = (float *)malloc(size);
    h_c = (float *)malloc(size);
    if (!h_a || !h_b || !h_c) {
        snprintf(g_detail, sizeof(g_detail), "host memory allocation failed");
        goto fail;
    }
    for (int i = 0; i < N; i++) {
        h_a[i] = 1.0f;
        h_b[i] = 2.0f;
    }

    CUDA_CHECK(cudaMalloc(&d_a, size));
    CUDA_CHECK(cudaMalloc(&d_b, size));
    CUDA_CHECK(cudaMalloc(&d_c, size));
    CUDA_CHECK(cudaMemcpy(d_a, h_a, size, cudaMemcpyHostToDevice));
    CUDA_CHECK(cudaMemcpy(d_b, h_b, size, cudaMemcpyHostToDevice));

    vector_add<<<blocks, threads>>>(d_a, d_b, d_c, N);
    CUDA_CHECK(cudaGetLastError());
    /* Asynchronous execution errors only surface at the barrier. */
    CUDA_CHECK(cudaDeviceSynchronize());

    CUDA_CHECK(cudaMemcpy(h_c, d_c, size, cudaMemcpyDeviceToHost));

    for (int i = 0; i < N; i++) {
        if (h_c[i] != 3.0f) {
            snprintf(g_detail, sizeof(g_detail),
                     "h_c[%d] = %f, expected 3.0", i, h_c[i]);
            passed = 0;
            break;
        }
    }

    cudaFree(d_a); cudaFree(d_b); cudaFree(d_c);
    free(h_a); free(h_b); free(h_c);
    return passed ? 0 : 1;

fail:
    cudaFree(d_a); cudaFree(d_b); cudaFree(d_c);
    free(h_a); free(h_b); free(h_c);
    return 1;
}

int main(void) {
    int device_count = 0;
    int failures = 0;
    cudaError_t err = cudaGetDeviceCount(&device_count);
    if (err != cudaSuccess || device_count == 0) {
        fprintf(stderr, "No CUDA devices found (%s)\n", cudaGetErrorString(err));
        return 1;
    }
    printf("  CUDA devices found: %d\n", device_count);

    for (int dev = 0; dev < device_count; dev++) {
        if (test_device(dev) == 0) {
            printf("@RESULT_PREFIX@ gpu=%d status=PASS\n", dev);
        } else {
            printf("@RESULT_PREFIX@ gpu=%d status=FAIL detail=%s\n", dev, g_detail);
            failures++;
        }
        fflush(stdout);
    }
    return failures > 0 ? 1 : 0;
}
"""

VECTOR_ADD_SOURCE = (
    _SOURCE_TEMPLATE
    .replace("@ELEMENTS@", str(VECTOR_ADD_ELEMENTS))
    .replace("@RESULT_PREFIX@", RESULT_PREFIX)
)

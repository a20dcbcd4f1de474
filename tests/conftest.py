import pytest


def make_attributes(guests=None, cpus="16", memory="65536 KiB", ohai_time=1357000000.5,
                    **kvm_extra):
    hardware = {}
    if cpus is not None:
        hardware["CPU(s)"] = cpus
    if memory is not None:
        hardware["Memory size"] = memory

    kvm = {"hardware": hardware, "guests": guests if guests is not None else {}}
    kvm.update(kvm_extra)

    automatic = {"virtualization": {"kvm": kvm}}
    if ohai_time is not None:
        automatic["ohai_time"] = ohai_time
    return {"automatic": automatic}


def make_guest(state="running", cpus="2", max_memory="4096 KiB", used_memory="2048 KiB"):
    guest = {"CPU(s)": cpus, "Max memory": max_memory}
    if state is not None:
        guest["state"] = state
    if used_memory is not None:
        guest["Used memory"] = used_memory
    return guest


@pytest.fixture
def hv1_attributes():
    return make_attributes(
        guests={
            "g1": make_guest("running", "4", "8192 KiB", "8192 KiB"),
            "g2": make_guest("paused", "4", "8192 KiB", "4096 KiB"),
        },
        guest_cpu_total=8,
        guest_maxmemory_total="16384 KiB",
        guest_usedmemory_total="12288 KiB",
    )

"""Tests for the predicate builder."""

from __future__ import annotations

from simproc.predicates import (
    Predicate,
    all_of,
    any_of,
    binary_matches,
    filter_processes,
    has_identity_tag,
    identity_tag_in,
    launch_path_equals,
    parent_pid_equals,
    process_name_equals,
    udid_in_launch_path,
    under_toolchain,
)
from simproc.process_models import BinaryDescriptor, ToolchainConfiguration
from tests.helpers.process_fakes import make_process

UDID = "ABCD-1234"
OTHER_UDID = "EFGH-5678"


class TestIdentityTag:
    def test_matches_exact_member(self) -> None:
        assert identity_tag_in([UDID, OTHER_UDID])(make_process(1, udid_tag=UDID))

    def test_missing_tag_never_matches(self) -> None:
        assert not identity_tag_in([UDID])(make_process(1))

    def test_tag_outside_set_never_matches(self) -> None:
        assert not identity_tag_in([UDID])(make_process(1, udid_tag=OTHER_UDID))

    def test_prefix_of_udid_is_not_a_match(self) -> None:
        assert not identity_tag_in([UDID])(make_process(1, udid_tag="ABCD"))

    def test_empty_udid_set_matches_nothing(self) -> None:
        assert not identity_tag_in([])(make_process(1, udid_tag=UDID))

    def test_has_identity_tag(self) -> None:
        assert has_identity_tag()(make_process(1, udid_tag=UDID))
        assert not has_identity_tag()(make_process(2))


class TestBinaryMatches:
    binary = BinaryDescriptor(path="/A/App.app/App", name="App")

    def test_original_path_matches(self) -> None:
        assert binary_matches(self.binary)(make_process(1, launch_path="/A/App.app/App"))

    def test_relocated_path_under_data_directory_matches(self) -> None:
        predicate = binary_matches(self.binary, data_directory=f"/D/{UDID}")
        process = make_process(1, launch_path=f"/D/{UDID}/Containers/Bundle/App.app/App")

        assert predicate(process)

    def test_relocated_path_outside_data_directory_does_not_match(self) -> None:
        predicate = binary_matches(self.binary, data_directory=f"/D/{UDID}")
        process = make_process(1, launch_path=f"/D/{OTHER_UDID}/Containers/Bundle/App.app/App")

        assert not predicate(process)

    def test_unrelated_path_does_not_match(self) -> None:
        predicate = binary_matches(self.binary, data_directory=f"/D/{UDID}")

        assert not predicate(make_process(1, launch_path="/usr/bin/App"))
        assert not predicate(make_process(2, launch_path=f"/D/{UDID}/Other.app/App"))

    def test_relocated_path_needs_udid_segment_without_data_directory(self) -> None:
        predicate = binary_matches(self.binary, udids=[UDID])

        assert predicate(make_process(1, launch_path=f"/Devices/{UDID}/data/App.app/App"))
        assert not predicate(make_process(2, launch_path=f"/Devices/{OTHER_UDID}/data/App.app/App"))
        assert not predicate(make_process(3, launch_path=f"/Devices/{UDID}/data/MyApp.app/App"))

    def test_only_original_path_without_scope(self) -> None:
        predicate = binary_matches(self.binary)

        assert predicate(make_process(1, launch_path="/A/App.app/App"))
        assert not predicate(make_process(2, launch_path="/anywhere/App.app/App"))

    def test_missing_launch_path_does_not_match(self) -> None:
        assert not binary_matches(self.binary)(make_process(1, launch_path=None))


class TestPathPredicates:
    def test_launch_path_equals(self) -> None:
        predicate = launch_path_equals("/usr/bin/thing")

        assert predicate(make_process(1, launch_path="/usr/bin/thing"))
        assert not predicate(make_process(2, launch_path="/usr/bin/thing2"))
        assert not predicate(make_process(3))

    def test_udid_in_launch_path_requires_whole_segment(self) -> None:
        predicate = udid_in_launch_path([UDID])

        assert predicate(make_process(1, launch_path=f"/Devices/{UDID}/data/launchd_sim"))
        assert not predicate(make_process(2, launch_path=f"/Devices/{UDID}-extra/launchd_sim"))
        assert not predicate(make_process(3))

    def test_under_toolchain_excludes_other_installations(self) -> None:
        predicate = under_toolchain(ToolchainConfiguration(root_path="/Xcode9"))

        assert predicate(make_process(1, launch_path="/Xcode9/Contents/Developer/service"))
        assert not predicate(make_process(2, launch_path="/Xcode8/Contents/Developer/service"))
        assert not predicate(make_process(3, launch_path="/Xcode9-beta/Contents/service"))
        assert not predicate(make_process(4))

    def test_process_name_falls_back_to_launch_path(self) -> None:
        predicate = process_name_equals("com.example.LongServiceName")

        assert predicate(make_process(1, name="com.example.LongServiceName"))
        assert predicate(make_process(2, name="com.example.Lon", launch_path="/x/com.example.LongServiceName"))
        assert not predicate(make_process(3, name="other", launch_path="/x/other"))

    def test_parent_pid_equals(self) -> None:
        assert parent_pid_equals(7)(make_process(1, ppid=7))
        assert not parent_pid_equals(7)(make_process(1, ppid=None))


class TestComposition:
    def test_and_or_not(self) -> None:
        tagged = identity_tag_in([UDID])
        named = process_name_equals("AppStub")
        process = make_process(1, name="AppStub", udid_tag=UDID)
        stranger = make_process(2, name="AppStub")

        assert (tagged & named)(process)
        assert not (tagged & named)(stranger)
        assert (tagged | named)(stranger)
        assert (~tagged)(stranger)
        assert not (~tagged)(process)

    def test_empty_combinators(self) -> None:
        process = make_process(1)

        assert all_of()(process)
        assert not any_of()(process)

    def test_descriptions_compose(self) -> None:
        predicate = launch_path_equals("/a") | launch_path_equals("/b")

        assert str(predicate) == "(launch path is /a) or (launch path is /b)"

    def test_predicate_result_is_bool(self) -> None:
        predicate = Predicate(lambda process: process.pid, "truthy pid")

        assert predicate(make_process(5)) is True


class TestFilterProcesses:
    def test_preserves_order_without_dedup(self) -> None:
        first = make_process(30, udid_tag=UDID)
        second = make_process(10, udid_tag=UDID)
        skipped = make_process(20)
        snapshot = [first, skipped, second, first]

        result = filter_processes(snapshot, identity_tag_in([UDID]))

        assert result == [first, second, first]

    def test_every_result_satisfies_predicate(self) -> None:
        predicate = under_toolchain(ToolchainConfiguration(root_path="/Xcode9"))
        snapshot = [make_process(pid, launch_path=f"/Xcode{pid % 2 + 8}/bin/p") for pid in range(20)]

        result = filter_processes(snapshot, predicate)

        assert result
        assert all(predicate(process) for process in result)
        assert [p.pid for p in result] == sorted(p.pid for p in result)

    def test_accepts_generators(self) -> None:
        processes = (make_process(pid) for pid in range(3))

        assert len(filter_processes(processes, all_of())) == 3
